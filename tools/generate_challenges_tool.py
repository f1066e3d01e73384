"""
generate_challenges_tool.py

Exposes a single entry point that the web API (or a CLI) can call to produce a
batch of practice challenges as plain dictionaries, e.g. for a printed drill
sheet or a preview list.
"""

from __future__ import annotations

import random
from typing import Any, Dict, Optional

from core.rods import DEFAULT_ROD_COUNT
from generators.challenge_generator import ChallengeGenerator, ProblemType
from schemas.abacus import ChallengePayload


def run_generate_challenges(
    kind: ProblemType | str,
    *,
    count: int = 5,
    rod_count: int = DEFAULT_ROD_COUNT,
    difficulty: str = "medium",
    seed: Optional[int] = None,
) -> Dict[str, Any]:
    generator = ChallengeGenerator(
        rod_count,
        rng=random.Random(seed),
        difficulty=difficulty,
    )
    kind = ProblemType(kind)
    challenges = [generator.generate(kind) for _ in range(count)]
    return {
        "type": kind.value,
        "difficulty": difficulty,
        "rod_count": rod_count,
        "seed": seed,
        "challenges": [
            ChallengePayload.from_challenge(challenge).model_dump()
            for challenge in challenges
        ],
    }


if __name__ == "__main__":
    sample = run_generate_challenges("MIXED", count=3, seed=3)
    for challenge in sample["challenges"]:
        print(challenge["question"], "=", challenge["target_value"])
