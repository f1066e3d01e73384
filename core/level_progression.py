"""
level_progression.py

Operand sizes for each practice level. This is the single table the
difficulty scaler and the challenge generator read when deciding how big the
numbers of a problem should be; digit counts here are upper bounds that get
clipped to the number of rods on the frame.

"""

LEVEL_ORDER = ("easy", "medium", "hard")

LEVEL_PROGRESSION = {
    "easy": {
        "description": "Single-digit chains and table facts; most moves are direct or five-complement.",
        "addition": {
            "terms": 2,
            "digits": 1,
        },
        "multiplication": {
            "multiplicand_digits": 1,
            "multiplier_digits": 1,
        },
        "division": {
            "dividend_digits": 2,
            "divisor_digits": 1,
        },
    },

    "medium": {
        "description": "Two-digit chains with carries and borrows; two-by-one multiplication.",
        "addition": {
            "terms": 3,
            "digits": 2,
        },
        "multiplication": {
            "multiplicand_digits": 2,
            "multiplier_digits": 1,
        },
        "division": {
            "dividend_digits": 3,
            "divisor_digits": 1,
        },
    },

    "hard": {
        "description": "Three-digit chains of four terms; multi-digit multipliers and divisors.",
        "addition": {
            "terms": 4,
            "digits": 3,
        },
        "multiplication": {
            "multiplicand_digits": 3,
            "multiplier_digits": 2,
        },
        "division": {
            "dividend_digits": 4,
            "divisor_digits": 2,
        },
    },
}


def get_level_info(level: str):
    """
    Returns the operand expectations for a level, or None for unknown names.
    Used by difficulty_scaler and challenge_generator.
    """
    return LEVEL_PROGRESSION.get(level, None)
