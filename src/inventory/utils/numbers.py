"""Best-effort conversion of freeform numeric input (form fields, cart edits)."""

import math


def coerce_number(value, default=0.0):
    """Convert numeric-like input to float; blanks and garbage become ``default``."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int | float):
        number = float(value)
    else:
        text = str(value).strip().replace(",", ".")
        if not text:
            return default
        try:
            number = float(text)
        except ValueError:
            return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def coerce_quantity(value, default=0):
    """Convert to a whole number of units, truncating any fraction."""
    return int(coerce_number(value, default=float(default)))
