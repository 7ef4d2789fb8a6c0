"""
Critical Path Tests: Fixed-Point Unit Conversion

Tests the decimal string <-> scaled integer conversion used for every
amount typed into the withdrawal form.

Priority: 🔴 CRITICAL (a wrong scale withdraws the wrong amount)
"""

from decimal import Decimal, ROUND_DOWN

import pytest

from Shared_Utils.precision import PrecisionUtils


class TestParseUnits:

    @pytest.mark.critical
    @pytest.mark.parametrize("text, decimals, expected", [
        ("1", 18, 10**18),
        ("1.5", 18, 1_500_000_000_000_000_000),
        (".25", 2, 25),
        ("7.", 3, 7000),
        ("0", 18, 0),
        ("  42  ", 0, 42),
        ("1.500", 1, 15),
        ("123456789.123456789123456789", 18, 123456789123456789123456789),
    ])
    def test_parses(self, text, decimals, expected):
        assert PrecisionUtils.parse_units(text, decimals) == expected

    @pytest.mark.critical
    @pytest.mark.parametrize("text", ["", ".", "-1", "1e18", "abc", "1,5", None, "1.2.3"])
    def test_rejects_malformed(self, text):
        with pytest.raises(ValueError):
            PrecisionUtils.parse_units(text, 18)

    @pytest.mark.critical
    def test_rejects_excess_precision(self):
        """
        Given: A token with 6 decimals
        When: The amount has a non-zero 7th decimal
        Then: It is rejected rather than silently truncated
        """
        with pytest.raises(ValueError):
            PrecisionUtils.parse_units("0.0000001", 6)

    @pytest.mark.parametrize("decimals", [-1, 1.5, True])
    def test_rejects_bad_decimals(self, decimals):
        with pytest.raises(ValueError):
            PrecisionUtils.parse_units("1", decimals)


class TestFormatUnits:

    @pytest.mark.critical
    @pytest.mark.parametrize("value, decimals, expected", [
        (10**18, 18, "1.0"),
        (1_500_000_000_000_000_000, 18, "1.5"),
        (1, 18, "0.000000000000000001"),
        (0, 18, "0.0"),
        (5, 0, "5.0"),
        (-25, 2, "-0.25"),
        (40 * 10**18, 18, "40.0"),
    ])
    def test_formats(self, value, decimals, expected):
        assert PrecisionUtils.format_units(value, decimals) == expected

    def test_format_then_parse_is_identity_for_wei_amounts(self):
        value = 123456789123456789123456789
        assert PrecisionUtils.parse_units(PrecisionUtils.format_units(value, 18), 18) == value


class TestDisplayHelpers:

    def test_to_display_rounds_half_up(self):
        utils = PrecisionUtils()

        assert utils.to_display(1_235_000_000_000_000_000, 18) == Decimal("1.24")
        assert utils.to_display(1_235_000_000_000_000_000, 18, rounding=ROUND_DOWN) == Decimal("1.23")
        assert utils.to_display(None, 18) is None

    def test_to_display_keeps_large_values_exact(self):
        utils = PrecisionUtils()

        assert utils.to_display(10**40, 18, places=0) == Decimal(10**22)

    def test_quant_from_places(self):
        assert PrecisionUtils().quant_from_places(4) == Decimal("0.0001")
        assert PrecisionUtils().quant_from_places(-3) == Decimal("0.01")
