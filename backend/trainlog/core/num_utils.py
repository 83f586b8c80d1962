import math


def round_half_up(value: float, digits: int = 0):
    """Round halves away from zero for positive values (2.5 -> 3).

    Python's round() uses banker's rounding; stored scores were produced
    with half-up rounding, so analytics must use this instead.
    Returns an int when digits == 0.
    """
    factor = 10 ** digits
    rounded = math.floor(value * factor + 0.5) / factor
    return int(rounded) if digits == 0 else rounded

