import math

LAKH = 100_000


class InputError(ValueError):
    """Raised when a form value cannot be submitted"""

    @property
    def message(self):
        return str(self)


def lakhs_suffix(in_lakhs):
    return " (Lakhs)" if in_lakhs else ""


def to_rupees(value, in_lakhs):
    """Convert a Lakhs figure to Rupees when the Lakhs flag is set"""
    return value * LAKH if in_lakhs else value


def _is_blank(raw):
    if raw is None:
        return True
    if isinstance(raw, str) and not raw.strip():
        return True
    return False


def parse_amount(raw, error_message, in_lakhs=False, allow_zero=True, optional=False):
    """Parse a single form amount.

    ``raw`` comes straight from a Gradio component, so it may be a number,
    a string or None. Returns the amount in Rupees as float, or None when the
    field is optional and left empty. Raises InputError with
    ``error_message`` for anything that cannot be submitted.
    """
    if _is_blank(raw):
        if optional:
            return None
        raise InputError(error_message)

    if isinstance(raw, bool):
        raise InputError(error_message)

    try:
        value = float(raw.strip() if isinstance(raw, str) else raw)
    except (TypeError, ValueError):
        raise InputError(error_message)

    if math.isnan(value) or math.isinf(value):
        raise InputError(error_message)

    if value < 0 or (value == 0 and not allow_zero):
        raise InputError(error_message)

    return float(to_rupees(value, in_lakhs))


def parse_percentage(raw, error_message, optional=True):
    """Parse a percentage such as an expected CAGR. Never Lakhs-converted."""
    return parse_amount(raw, error_message, in_lakhs=False, allow_zero=True, optional=optional)
