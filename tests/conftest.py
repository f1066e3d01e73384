import random
import sys
from pathlib import Path

import pytest

# Put the repository root on sys.path so the top-level packages import.
ROOT_PATH = Path(__file__).resolve().parent.parent
if ROOT_PATH.as_posix() not in sys.path:
    sys.path.insert(0, ROOT_PATH.as_posix())

from generators.challenge_generator import Challenge, ProblemType  # noqa: E402
from trainer.stats_store import TrainerStore  # noqa: E402


@pytest.fixture
def rng():
    """Seeded random source so generated problems are reproducible."""
    return random.Random(1234)


@pytest.fixture
def make_challenge():
    """Build a fixed challenge without going through the generator."""

    def _make(kind, target, steps=None, operators=None):
        kind = ProblemType(kind)
        steps = steps or [target]
        return Challenge(
            type=kind,
            question=" ".join(str(step) for step in steps),
            target_value=target,
            steps=steps,
            operators=operators or [],
        )

    return _make


@pytest.fixture
def store(tmp_path: Path):
    """Store backed by a throwaway JSON file."""
    return TrainerStore(tmp_path / "trainer.json")
