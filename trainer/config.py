from __future__ import annotations

import os
from pathlib import Path
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from core.rods import DEFAULT_ROD_COUNT

load_dotenv()

DEFAULT_DATA_FILE = Path(__file__).resolve().parent.parent / "data" / "trainer.json"


class TrainerConfig(BaseModel):
    """Process-wide settings, read from the environment (or a `.env` file)."""

    rod_count: int = Field(DEFAULT_ROD_COUNT, ge=1, le=30)
    difficulty: Literal["easy", "medium", "hard"] = "medium"
    data_file: Path = DEFAULT_DATA_FILE
    log_level: str = "INFO"
    seed: Optional[int] = None

    @classmethod
    def from_env(cls) -> "TrainerConfig":
        values = {
            "rod_count": os.getenv("ABACUS_ROD_COUNT"),
            "difficulty": os.getenv("ABACUS_DIFFICULTY"),
            "data_file": os.getenv("ABACUS_DATA_FILE"),
            "log_level": os.getenv("ABACUS_LOG_LEVEL"),
            "seed": os.getenv("ABACUS_SEED"),
        }
        return cls(**{key: value for key, value in values.items() if value not in (None, "")})
