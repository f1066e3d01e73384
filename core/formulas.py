"""
formulas.py

Recognizes which counting technique (koujue) a single-rod bead move stands
for. The lookup is keyed on the size of the move, its direction and the bead
pattern that produced it:

* five-complement: one heaven bead toggles while earth beads move the other
  way (or the heaven bead moves alone),
* ten-complement / break-five: the rod passes the 9/10 boundary, which is how
  a carry or borrow with the neighbouring rod shows up on a single rod,
* direct: beads simply go up (or come off) in one direction.

Every move that changes the rod's value gets a formula; only a move that
leaves the value untouched yields None.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from core.rods import HEAVEN_BEAD_VALUE, RodModel, canonical_beads

DIGIT_NAMES = {
    1: "一",
    2: "二",
    3: "三",
    4: "四",
    5: "五",
    6: "六",
    7: "七",
    8: "八",
    9: "九",
}

LARGEST_DIGIT = 9
TEN = 10


@dataclass(frozen=True)
class Formula:
    """One recognized technique, ready to be shown or spoken."""

    action: str
    koujue: str
    description: str


# --------------------------------------------------------------------------- #
# Public API
# --------------------------------------------------------------------------- #


def identify_formula(old_value: int, new_value: int) -> Optional[Formula]:
    """
    Classifies a rod going from `old_value` to `new_value`.

    Only the values are known here, so each is read through its canonical bead
    pattern (see `canonical_beads`).
    """

    old_heaven, old_earth = canonical_beads(old_value)
    new_heaven, new_earth = canonical_beads(new_value)
    return _classify(old_heaven, old_earth, new_heaven, new_earth)


def classify_rod_change(before: RodModel, after: RodModel) -> Optional[Formula]:
    """Same as `identify_formula`, but uses the beads that actually moved."""

    return _classify(
        before.active_heaven_count,
        before.active_earth_count,
        after.active_heaven_count,
        after.active_earth_count,
    )


def reference_formulas() -> Dict[str, List[Formula]]:
    """Every canonical formula, grouped by family, for a reference panel."""

    small = range(1, 5)
    large = range(6, LARGEST_DIGIT + 1)
    digits = range(1, LARGEST_DIGIT + 1)
    return {
        "direct_addition": [_direct_formula(n, adding=True) for n in (*small, *large)],
        "five_complement_addition": [_five_formula(n, adding=True) for n in range(1, 6)],
        "ten_complement_addition": [_ten_formula(n, adding=True) for n in digits],
        "break_five_addition": [_break_five_formula(n, adding=True) for n in large],
        "direct_subtraction": [_direct_formula(n, adding=False) for n in (*small, *large)],
        "five_complement_subtraction": [_five_formula(n, adding=False) for n in range(1, 6)],
        "ten_complement_subtraction": [_ten_formula(n, adding=False) for n in digits],
        "break_five_subtraction": [_break_five_formula(n, adding=False) for n in large],
        "ten_exchange": [_exchange_formula(TEN, adding=True), _exchange_formula(TEN, adding=False)],
    }


# --------------------------------------------------------------------------- #
# Classification
# --------------------------------------------------------------------------- #


def _classify(old_heaven: int, old_earth: int, new_heaven: int, new_earth: int) -> Optional[Formula]:
    old_value = old_heaven * HEAVEN_BEAD_VALUE + old_earth
    new_value = new_heaven * HEAVEN_BEAD_VALUE + new_earth
    delta = new_value - old_value
    if delta == 0:
        return None

    amount = abs(delta)
    adding = delta > 0

    # Checked before the ten family: a five-complement needs fewer bead moves.
    if _is_five_pattern(amount, new_heaven - old_heaven, new_earth - old_earth):
        return _five_formula(amount, adding)

    if _crosses_ten(old_value, new_value):
        if amount >= TEN:
            return _exchange_formula(amount, adding)
        if adding:
            if _needs_break_five_carry(amount, old_heaven, old_earth):
                return _break_five_formula(amount, adding=True)
            return _ten_formula(amount, adding=True)
        if _needs_break_five_borrow(amount, old_value - TEN):
            return _break_five_formula(amount, adding=False)
        return _ten_formula(amount, adding=False)

    return _direct_formula(amount, adding)


def _is_five_pattern(amount: int, heaven_delta: int, earth_delta: int) -> bool:
    if abs(heaven_delta) != 1:
        return False
    if amount == HEAVEN_BEAD_VALUE:
        return earth_delta == 0
    return heaven_delta * earth_delta < 0 and abs(earth_delta) == HEAVEN_BEAD_VALUE - amount


def _crosses_ten(old_value: int, new_value: int) -> bool:
    return (old_value <= LARGEST_DIGIT) != (new_value <= LARGEST_DIGIT)


def _needs_break_five_carry(amount: int, old_heaven: int, old_earth: int) -> bool:
    complement = TEN - amount
    return amount > HEAVEN_BEAD_VALUE and old_heaven >= 1 and old_earth < complement


def _needs_break_five_borrow(amount: int, digit: int) -> bool:
    # `digit` is what the rod held before the ten was borrowed onto it.
    complement = TEN - amount
    return (
        amount > HEAVEN_BEAD_VALUE
        and digit < HEAVEN_BEAD_VALUE
        and digit + complement >= HEAVEN_BEAD_VALUE
    )


# --------------------------------------------------------------------------- #
# Formula builders
# --------------------------------------------------------------------------- #


def _direct_formula(amount: int, adding: bool) -> Formula:
    name = DIGIT_NAMES[amount]
    if amount <= HEAVEN_BEAD_VALUE:
        koujue = f"{name}上{name}" if adding else f"{name}去{name}"
        beads = f"{amount} lower bead{'s' if amount > 1 else ''}"
    else:
        rest = DIGIT_NAMES[amount - HEAVEN_BEAD_VALUE]
        koujue = f"{name}下五上{rest}" if adding else f"{name}去五去{rest}"
        beads = f"the upper bead and {amount - HEAVEN_BEAD_VALUE} lower"
    if adding:
        return Formula(
            action=f"direct_add_{amount}",
            koujue=koujue,
            description=f"Add {amount} directly: move {beads} toward the beam.",
        )
    return Formula(
        action=f"direct_subtract_{amount}",
        koujue=koujue,
        description=f"Subtract {amount} directly: move {beads} away from the beam.",
    )


def _five_formula(amount: int, adding: bool) -> Formula:
    name = DIGIT_NAMES[amount]
    complement = HEAVEN_BEAD_VALUE - amount
    if adding:
        if complement == 0:
            koujue = "五下五"
            description = "Add 5 by bringing one upper bead down to the beam."
        else:
            koujue = f"{name}下五去{DIGIT_NAMES[complement]}"
            description = (
                f"Add {amount} with the five-complement: bring down the upper bead "
                f"and take away {complement}."
            )
        return Formula(action=f"five_complement_add_{amount}", koujue=koujue, description=description)

    if complement == 0:
        koujue = "五去五"
        description = "Subtract 5 by lifting one upper bead off the beam."
    else:
        koujue = f"{name}上{DIGIT_NAMES[complement]}去五"
        description = (
            f"Subtract {amount} with the five-complement: add {complement} "
            f"and lift the upper bead away."
        )
    return Formula(action=f"five_complement_subtract_{amount}", koujue=koujue, description=description)


def _ten_formula(amount: int, adding: bool) -> Formula:
    name = DIGIT_NAMES[amount]
    complement = TEN - amount
    if adding:
        return Formula(
            action=f"ten_complement_add_{amount}",
            koujue=f"{name}去{DIGIT_NAMES[complement]}进一",
            description=(
                f"Add {amount} with the ten-complement: take away {complement} here "
                f"and carry one to the rod on the left."
            ),
        )
    return Formula(
        action=f"ten_complement_subtract_{amount}",
        koujue=f"{name}退一还{DIGIT_NAMES[complement]}",
        description=(
            f"Subtract {amount} with the ten-complement: borrow one from the rod on "
            f"the left and give back {complement} here."
        ),
    )


def _break_five_formula(amount: int, adding: bool) -> Formula:
    name = DIGIT_NAMES[amount]
    rest = amount - HEAVEN_BEAD_VALUE
    if adding:
        return Formula(
            action=f"break_five_carry_add_{amount}",
            koujue=f"{name}上{DIGIT_NAMES[rest]}去五进一",
            description=(
                f"Add {amount} by breaking the five: add {rest}, lift the upper bead "
                f"away and carry one to the rod on the left."
            ),
        )
    return Formula(
        action=f"break_five_borrow_subtract_{amount}",
        koujue=f"{name}退一还五去{DIGIT_NAMES[rest]}",
        description=(
            f"Subtract {amount} by breaking the five: borrow one from the left rod, "
            f"give back the upper bead and take away {rest}."
        ),
    )


def _exchange_formula(amount: int, adding: bool) -> Formula:
    extra = amount - TEN
    if adding:
        description = "The rod took a ten from the rod on its left"
        if extra:
            description += f" and {extra} more"
        return Formula(action="borrow_ten", koujue="借一当十", description=description + ".")
    description = "The rod passed nine: clear ten here and carry one to the rod on the left"
    if extra:
        description += f", removing {extra} more"
    return Formula(action="carry_ten", koujue="满十进一", description=description + ".")


if __name__ == "__main__":
    for old, new in [(4, 7), (8, 3), (8, 15), (13, 6), (2, 9)]:
        print(old, "->", new, identify_formula(old, new))
