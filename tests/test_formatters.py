"""Tests for formatters."""

import pytest

from channel_rating.formatters import (
    format_distance,
    format_frequency,
    format_level,
    format_rating,
    format_strength,
)
from channel_rating.models import Strength


class TestFrequencyFormatter:
    """Frequencies given in MHz."""

    def test_format_negative(self) -> None:
        assert format_frequency(-1) == ""

    def test_format_none(self) -> None:
        assert format_frequency(None) == ""

    def test_format_mhz(self) -> None:
        assert format_frequency(900) == "900 MHz"

    def test_format_ghz(self) -> None:
        assert format_frequency(2412) == "2.412 GHz"

    def test_format_ghz_trailing_zeros(self) -> None:
        assert format_frequency(5200) == "5.2 GHz"

    def test_format_exact_ghz(self) -> None:
        assert format_frequency(1000) == "1 GHz"


class TestLevelFormatter:

    def test_format_value(self) -> None:
        assert format_level(-50) == "-50 dBm"

    def test_format_rounds(self) -> None:
        assert format_level(-70.6) == "-71 dBm"

    def test_format_none(self) -> None:
        assert format_level(None) == ""

    def test_format_nan(self) -> None:
        assert format_level(float("nan")) == ""


class TestDistanceFormatter:

    def test_format_value(self) -> None:
        assert format_distance(3.24) == "~3.2m"

    def test_format_whole(self) -> None:
        assert format_distance(10.0) == "~10m"

    @pytest.mark.parametrize("value", [None, float("nan"), -1.0])
    def test_format_invalid(self, value) -> None:
        assert format_distance(value) == ""


class TestRatingFormatter:

    def test_partial(self) -> None:
        assert format_rating(3) == "★★★☆☆"

    def test_clamped(self) -> None:
        assert format_rating(9) == "★★★★★"
        assert format_rating(-2) == "☆☆☆☆☆"

    def test_strength_name(self) -> None:
        assert format_strength(Strength.FOUR) == "Four"
