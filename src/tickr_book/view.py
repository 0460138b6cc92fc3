"""History view state: stock list or single-stock detail."""

from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Union

from .aggregation import summarize, trades_for_stock
from .models import ALL, SORT_BY_DATE, SORT_BY_STOCK, STRATEGIES, StockSummary, Trade


@dataclass(frozen=True)
class HistoryView:
    """Filters and selection of the trade history.

    ``selected_stock`` is None while the stock list is shown and holds the
    stock name while its trades are shown.
    """
    selected_stock: Optional[str] = None
    strategy: str = ALL
    search: str = ''
    sort_by: str = SORT_BY_STOCK

    @property
    def is_detail(self) -> bool:
        return self.selected_stock is not None

    def select(self, stock_name: str) -> 'HistoryView':
        return replace(self, selected_stock=stock_name)

    def back(self) -> 'HistoryView':
        return replace(self, selected_stock=None)

    def set_strategy(self, strategy: str) -> 'HistoryView':
        for option in (ALL,) + STRATEGIES:
            if strategy.lower() == option.lower():
                return replace(self, strategy=option)
        raise ValueError(f"Unknown strategy filter: {strategy}")

    def set_search(self, text: str) -> 'HistoryView':
        return replace(self, search=text or '')

    def toggle_sort(self) -> 'HistoryView':
        return replace(self, sort_by=SORT_BY_STOCK if self.sort_by == SORT_BY_DATE else SORT_BY_DATE)

    def render(self, trades: Iterable[Trade]) -> Union[List[StockSummary], List[Trade]]:
        """Summaries in list state, the selected stock's trades in detail state."""
        if self.is_detail:
            return trades_for_stock(trades, self.selected_stock, self.strategy)
        return summarize(trades, self.strategy, self.search, self.sort_by)
