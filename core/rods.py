"""
rods.py

Bead model for one rod of the frame plus the helpers that fold a row of rods
into a single number. Rods are immutable snapshots: a bead move hands back a
new rod (and a new board) so callers keep the previous state around for
formula lookup.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Tuple

logger = logging.getLogger(__name__)

HEAVEN_BEAD_VALUE = 5
EARTH_BEAD_VALUE = 1
MAX_HEAVEN_BEADS = 2
MAX_EARTH_BEADS = 5
MAX_ROD_VALUE = MAX_HEAVEN_BEADS * HEAVEN_BEAD_VALUE + MAX_EARTH_BEADS * EARTH_BEAD_VALUE

# A standard suanpan carries 13 rods.
DEFAULT_ROD_COUNT = 13


class OutOfRangeError(ValueError):
    """A bead move asked for more (or fewer) beads than the rod carries."""

    def __init__(self, bead: str, count: int, maximum: int):
        super().__init__(f"{bead} bead count {count} is outside 0..{maximum}.")
        self.bead = bead
        self.count = count
        self.maximum = maximum


@dataclass(frozen=True)
class RodModel:
    """
    One decimal place of the frame.

    `value` is derived on every read and is deliberately not clamped to 0..9:
    a learner halfway through a complement move may leave the rod at 10..15.
    """

    id: int
    active_heaven_count: int = 0
    active_earth_count: int = 0

    def __post_init__(self) -> None:
        if self.id < 0:
            raise ValueError(f"Rod id must be non-negative: {self.id}")
        _check_count("heaven", self.active_heaven_count, MAX_HEAVEN_BEADS)
        _check_count("earth", self.active_earth_count, MAX_EARTH_BEADS)

    @property
    def value(self) -> int:
        return (
            self.active_heaven_count * HEAVEN_BEAD_VALUE
            + self.active_earth_count * EARTH_BEAD_VALUE
        )


Board = Tuple[RodModel, ...]


def _check_count(bead: str, count: int, maximum: int) -> None:
    if not 0 <= count <= maximum:
        raise OutOfRangeError(bead, count, maximum)


def create_initial_rods(count: int = DEFAULT_ROD_COUNT) -> Board:
    """Zeroed board with `count` rods, ids 0..count-1 from the left."""

    if count < 1:
        raise ValueError(f"A board needs at least one rod, got {count}.")
    return tuple(RodModel(id=index) for index in range(count))


def set_bead(rod: RodModel, heaven_count: int, earth_count: int) -> RodModel:
    """
    Returns `rod` with the requested bead counts engaged.

    Raises OutOfRangeError before anything is built, so the caller's rod (and
    board) stay exactly as they were.
    """

    _check_count("heaven", heaven_count, MAX_HEAVEN_BEADS)
    _check_count("earth", earth_count, MAX_EARTH_BEADS)
    return replace(
        rod,
        active_heaven_count=heaven_count,
        active_earth_count=earth_count,
    )


def place_bead(board: Board, rod_id: int, heaven_count: int, earth_count: int) -> Board:
    """New board with rod `rod_id` replaced; every other rod is reused as-is."""

    if not 0 <= rod_id < len(board):
        raise IndexError(f"Rod {rod_id} is not on this {len(board)}-rod board.")
    updated = set_bead(board[rod_id], heaven_count, earth_count)
    logger.debug(
        "Rod %d: %d -> %d (heaven=%d, earth=%d)",
        rod_id,
        board[rod_id].value,
        updated.value,
        heaven_count,
        earth_count,
    )
    return board[:rod_id] + (updated,) + board[rod_id + 1:]


def rod_weight(rod_id: int, rod_count: int) -> int:
    """Power of ten carried by `rod_id`; the rightmost rod is the units rod."""

    return rod_count - 1 - rod_id


def calculate_total_value(board: Board) -> int:
    """Positional sum of every rod, transient values above nine included."""

    if not board:
        raise ValueError("Cannot total an empty board.")
    rod_count = len(board)
    return sum(rod.value * 10 ** rod_weight(rod.id, rod_count) for rod in board)


def canonical_beads(value: int) -> Tuple[int, int]:
    """
    (heaven, earth) pattern a bare rod value is read as.

    Heaven beads are used first, so 5 reads as one heaven bead and 15 as two
    heaven beads plus five earth beads.
    """

    if not 0 <= value <= MAX_ROD_VALUE:
        raise OutOfRangeError("rod value", value, MAX_ROD_VALUE)
    heaven = min(value // HEAVEN_BEAD_VALUE, MAX_HEAVEN_BEADS)
    return heaven, value - heaven * HEAVEN_BEAD_VALUE


if __name__ == "__main__":
    rods = create_initial_rods(2)
    rods = place_bead(rods, 1, 1, 3)
    print([rod.value for rod in rods], calculate_total_value(rods))
