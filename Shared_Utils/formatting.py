from Config import constants_core as core
from Shared_Utils.precision import PrecisionUtils


def format_address(addr: str, length: int = core.ADDRESS_DISPLAY_CHARS) -> str:
    """Shorten an address for display: '0x385Eea...'."""
    return f"{addr[:length]}..."


def format_balance(raw_balance, decimals: int = core.DEFAULT_TOKEN_DECIMALS,
                   places: int = core.BALANCE_DISPLAY_PLACES) -> str:
    """
    Render a raw on-chain balance (wei string or int) in token units.

    format_balance("1234500000000000000") -> "1.23"
    Unparseable input renders as zero rather than raising, it only feeds a label.
    """
    try:
        raw = int(str(raw_balance).strip())
    except ValueError:
        raw = 0
    return str(PrecisionUtils().to_display(raw, decimals, places))


def format_chain_as_num(chain_id_hex: str) -> int:
    """'0x89' -> 137; plain decimal strings are accepted too."""
    text = str(chain_id_hex).strip().lower()
    if text.startswith('0x'):
        return int(text, 16)
    return int(text)
