"""Human-readable formatters for channel rating output.

This module converts frequencies, signal levels, distances and
ratings into the short strings shown by the CLI tables and the
Plotly hover text.
"""

import math
from typing import Optional, Union

from channel_rating.models import Strength

_ONE_GHZ_IN_MHZ: int = 1_000

#: Number of stars in a full rating.
MAX_RATING: int = len(Strength)


def format_frequency(value: Optional[Union[int, float]]) -> str:
    """Format a frequency in MHz to a human-readable string.

    * ``None`` or negative → ``""``
    * < 1 GHz → ``"<n> MHz"``
    * ≥ 1 GHz → ``"<n> GHz"``  (up to 3 decimals, ``#.###`` style)

    Args:
        value: Frequency in MHz, or ``None``.

    Returns:
        Formatted string, or ``""`` for ``None`` / negative values.
    """
    if value is None:
        return ""

    int_val = int(value)
    if int_val < 0:
        return ""

    if int_val < _ONE_GHZ_IN_MHZ:
        return f"{int_val} MHz"

    return f"{_format_decimal(float(value) / _ONE_GHZ_IN_MHZ, 3)} GHz"


def format_level(value: Optional[float]) -> str:
    """Format a signal level as ``"<n> dBm"``.

    ``None`` or ``NaN`` → ``""``.
    """
    if value is None or math.isnan(value):
        return ""
    return f"{int(round(value))} dBm"


def format_distance(value: Optional[float]) -> str:
    """Format an estimated distance in metres, e.g. ``"~3.2m"``.

    ``None``, ``NaN`` or negative → ``""``.
    """
    if value is None or math.isnan(value) or value < 0:
        return ""
    return f"~{_format_decimal(value, 1)}m"


def format_rating(value: int, maximum: int = MAX_RATING) -> str:
    """Render a star rating, e.g. ``format_rating(3)`` → ``"★★★☆☆"``.

    Values are clamped to ``0..maximum``.
    """
    filled = max(0, min(maximum, value))
    return "★" * filled + "☆" * (maximum - filled)


def format_strength(strength: Strength) -> str:
    """Name of a strength category in title case (``"Four"``)."""
    return strength.name.title()


def _format_decimal(value: float, places: int) -> str:
    """Format a float with up to *places* decimals, trailing zeros stripped.

    Args:
        value: The number to format.
        places: Maximum number of decimal places.

    Returns:
        Formatted string (e.g. ``"2.412"`` or ``"5.2"``).
    """
    formatted = f"{value:.{places}f}"
    if "." in formatted:
        formatted = formatted.rstrip("0").rstrip(".")
    return formatted
