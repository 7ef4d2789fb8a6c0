import re
from typing import Optional
from decimal import Decimal, ROUND_HALF_UP, localcontext


_UNITS_PATTERN = re.compile(r'^(\d*)(?:\.(\d*))?$')


class PrecisionUtils:
    def __init__(self, logger_manager=None):
        """ Initialize PrecisionUtils. """
        self.logger = logger_manager.get_logger('shared_logger') if logger_manager else None

    @staticmethod
    def parse_units(value: str, decimals: int) -> int:
        """
        Convert a decimal string in token units into a fixed-point integer.

        parse_units("1.5", 18) -> 1500000000000000000

        Trailing fractional zeros are ignored, any other digit past `decimals`
        is rejected rather than silently rounded.
        """
        if not isinstance(decimals, int) or isinstance(decimals, bool) or decimals < 0:
            raise ValueError(f"decimals must be a non-negative integer, got {decimals!r}")

        text = str(value).strip() if value is not None else ''
        match = _UNITS_PATTERN.match(text)
        if not match or text in ('', '.'):
            raise ValueError(f"not a non-negative decimal number: {value!r}")

        whole, fraction = match.group(1), (match.group(2) or '').rstrip('0')
        if len(fraction) > decimals:
            raise ValueError(f"{value!r} has more than {decimals} decimal places")
        return int(whole or '0') * 10 ** decimals + int(fraction.ljust(decimals, '0') or '0')

    @staticmethod
    def format_units(value: int, decimals: int) -> str:
        """
        Convert a fixed-point integer back into a decimal string.

        format_units(1500000000000000000, 18) -> "1.5"; always keeps one
        fractional digit ("2.0").
        """
        if not isinstance(decimals, int) or isinstance(decimals, bool) or decimals < 0:
            raise ValueError(f"decimals must be a non-negative integer, got {decimals!r}")

        sign = '-' if value < 0 else ''
        whole, fraction = divmod(abs(int(value)), 10 ** decimals)
        fraction_text = str(fraction).rjust(decimals, '0').rstrip('0') if decimals else ''
        return f"{sign}{whole}.{fraction_text or '0'}"

    def quant_from_places(self, decimal_places: int) -> Decimal:
        """Return a quantizer Decimal like 1e-5 for decimal_places=5."""
        if not isinstance(decimal_places, int) or decimal_places < 0:
            if self.logger:
                self.logger.warning(f"⚠️ quant_from_places: invalid decimal_places={decimal_places}; defaulting to 2.")
            decimal_places = 2
        return Decimal('1').scaleb(-decimal_places)

    def to_display(self, raw: int, decimals: int, places: int = 2,
                   rounding=ROUND_HALF_UP) -> Optional[Decimal]:
        """
        Scale a fixed-point integer down to a Decimal with `places` digits for display.
        Rounds half-up by default; pass ROUND_DOWN to truncate.
        """
        if raw is None:
            return None
        with localcontext() as ctx:
            # cover every integer digit plus the requested places
            ctx.prec = max(len(str(abs(int(raw)))) + places + 2, 28)
            value = Decimal(int(raw)).scaleb(-decimals)
            return value.quantize(self.quant_from_places(places), rounding=rounding)


__all__ = ['PrecisionUtils']
