"""Number formatting shared by keys, shortcodes and corrections."""

import math
from typing import Optional, Union

Number = Union[int, float]


def format_number(value: Optional[Number]) -> str:
    """
    Render a millimetre value without a trailing ".0".

    Example:
        format_number(600.0)  -> "600"
        format_number(18.5)   -> "18.5"
    """
    if value is None:
        return ""
    number = float(value)
    if number.is_integer():
        return str(int(number))
    return str(number)


def to_number(value) -> Optional[float]:
    """Coerce a payload value to float, returning None when not a finite number."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (ValueError, TypeError):
        return None
    # "nan" and "inf" parse as floats but are not measurements
    return number if math.isfinite(number) else None
