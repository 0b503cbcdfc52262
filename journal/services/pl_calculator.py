"""Net profit/loss computation for a closed stock trade.

All functions are pure. Prices are per share, ``lot`` counts board lots of
``LOT_SIZE`` shares and ``fee_rate`` is charged on both legs' notional.
"""

LOT_SIZE = 100
DEFAULT_FEE_RATE = 0.004026

# Fees above this are percent values (legacy 0.4026 == 0.4026%), not rates
LEGACY_PERCENT_FEE_THRESHOLD = 0.1


def compute_gross_pl(entry_price: float, exit_price: float, lot: int) -> float:
    return (exit_price - entry_price) * lot * LOT_SIZE


def compute_fee(
    entry_price: float,
    exit_price: float,
    lot: int,
    fee_rate: float = DEFAULT_FEE_RATE,
) -> float:
    """Total fee for the round trip: (entry + exit) notional times the rate."""
    return (entry_price + exit_price) * lot * LOT_SIZE * fee_rate


def compute_net_pl(
    entry_price: float,
    exit_price: float,
    lot: int,
    fee_rate: float = DEFAULT_FEE_RATE,
) -> float:
    """Signed net P/L after fees.

    Example: 1000 -> 1200, 1 lot, 0.004026 gives 20000 - 885.72 = 19114.28.
    """
    gross = compute_gross_pl(entry_price, exit_price, lot)
    return gross - compute_fee(entry_price, exit_price, lot, fee_rate)


def is_win(net_pl: float) -> bool:
    """A break-even trade is not a win."""
    return net_pl > 0


def pl_percentage(net_pl: float, entry_price: float, lot: int) -> float:
    """Net P/L as a percentage of the entry notional."""
    notional = entry_price * lot * LOT_SIZE
    if notional == 0:
        return 0.0
    return net_pl / notional * 100


def normalize_fee_rate(fee: float | None, default: float = DEFAULT_FEE_RATE) -> float:
    """Map a stored fee to a rate. Missing -> default, percent -> fraction."""
    if fee is None:
        return default
    if fee > LEGACY_PERCENT_FEE_THRESHOLD:
        return fee / 100
    return fee
