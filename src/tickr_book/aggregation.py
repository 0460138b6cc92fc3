"""Trade aggregation: filtering, grouping, per-stock statistics and sorting.

Everything here is a pure function over a list of trades; callers reload the
trade list from the store and aggregate again after every change.
"""

import logging
from datetime import timezone
from typing import Dict, Iterable, List, Optional, Union

from .models import (ALL, SORT_BY_DATE, SORT_BY_STOCK, SORT_MODES, StockStats, StockSummary, Trade,
                     round_price)

logger = logging.getLogger(__name__)


def _quantity(value) -> Union[int, float]:
    qty = float(value)
    return int(qty) if qty.is_integer() else qty


def matches_strategy(trade: Trade, strategy: Optional[str]) -> bool:
    if not strategy or strategy.lower() == ALL.lower():
        return True
    return trade.strategy.lower() == strategy.lower()


def matches_search(trade: Trade, search: Optional[str]) -> bool:
    if not search:
        return True
    return search.lower() in trade.stock_name.lower()


def matches_filters(trade: Trade, strategy: Optional[str] = ALL, search: Optional[str] = '') -> bool:
    """Check a trade against the strategy and search filters."""
    return matches_search(trade, search) and matches_strategy(trade, strategy)


def group_trades(trades: Iterable[Trade],
                 strategy: Optional[str] = ALL,
                 search: Optional[str] = '') -> Dict[str, List[Trade]]:
    """Group the trades passing the filters by stock name, keeping insertion order."""
    groups: Dict[str, List[Trade]] = {}
    for trade in trades:
        if not matches_filters(trade, strategy, search):
            continue
        groups.setdefault(trade.stock_name, []).append(trade)
    return groups


def calculate_stats(trades: Iterable[Trade]) -> StockStats:
    """Compute summary statistics for the trades of one stock.

    The average prices are rounded to two decimals before they are used for
    the invested amount and P/L. ``total_qty`` is the larger of the bought and
    sold quantities, and the invested amount falls back to the sell average
    when there is no buy side to value it with.
    """
    total_buy_qty = 0
    total_buy_value = 0.0
    total_sell_qty = 0
    total_sell_value = 0.0

    for t in trades:
        qty = _quantity(t.quantity)
        price = float(t.price)
        if t.is_buy:
            total_buy_qty += qty
            total_buy_value += qty * price
        elif t.is_sell:
            total_sell_qty += qty
            total_sell_value += qty * price

    avg_buy_price = round_price(total_buy_value / total_buy_qty) if total_buy_qty > 0 else 0
    avg_sell_price = round_price(total_sell_value / total_sell_qty) if total_sell_qty > 0 else 0

    total_qty = max(total_buy_qty, total_sell_qty)

    total_invested = total_qty * avg_buy_price
    if total_invested == 0:
        total_invested = total_qty * avg_sell_price

    pnl = 0
    if total_buy_qty > 0 and total_sell_value > 0:
        pnl = (total_sell_qty * avg_sell_price) - (total_sell_qty * avg_buy_price)

    return StockStats(
        total_buy_qty=total_buy_qty,
        total_buy_value=total_buy_value,
        total_sell_qty=total_sell_qty,
        total_sell_value=total_sell_value,
        avg_buy_price=avg_buy_price,
        avg_sell_price=avg_sell_price,
        total_qty=total_qty,
        total_invested=total_invested,
        pnl=pnl,
    )


def _first_trade_timestamp(group: List[Trade]) -> float:
    # Only the first trade of the group counts, not the latest one.
    parsed = group[0].trade_date if group else None
    if parsed is None:
        return float('-inf')
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp()


def sort_stocks(groups: Dict[str, List[Trade]], sort_by: str = SORT_BY_STOCK) -> List[str]:
    """Order stock names by name, or by the date of each group's first trade (newest first)."""
    if sort_by not in SORT_MODES:
        raise ValueError(f"Unknown sort mode: {sort_by}")
    if sort_by == SORT_BY_DATE:
        return sorted(groups, key=lambda name: _first_trade_timestamp(groups[name]), reverse=True)
    return sorted(groups, key=lambda name: (name.casefold(), name))


def summarize(trades: Iterable[Trade],
              strategy: Optional[str] = ALL,
              search: Optional[str] = '',
              sort_by: str = SORT_BY_STOCK) -> List[StockSummary]:
    """Build the sorted per-stock summary for the current filters."""
    groups = group_trades(trades, strategy, search)
    summaries = [
        StockSummary(stock_name=name, trade_count=len(groups[name]), stats=calculate_stats(groups[name]))
        for name in sort_stocks(groups, sort_by)
    ]
    logger.debug(f"Summarized {len(summaries)} stocks (strategy={strategy}, search={search!r}, sort={sort_by})")
    return summaries


def trades_for_stock(trades: Iterable[Trade], stock_name: str, strategy: Optional[str] = ALL) -> List[Trade]:
    """Trades of one stock under the strategy filter, in insertion order."""
    return [t for t in trades if t.stock_name == stock_name and matches_strategy(t, strategy)]
