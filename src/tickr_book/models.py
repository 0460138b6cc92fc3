"""Data models for Tickr Book."""

import time
from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Optional

BUY = 'Buy'
SELL = 'Sell'
TRADE_TYPES = (BUY, SELL)

INTRADAY = 'Intraday'
SWING = 'Swing'
STRATEGIES = (INTRADAY, SWING)

# Strategy filter value meaning "every strategy"
ALL = 'All'

SORT_BY_STOCK = 'stock'
SORT_BY_DATE = 'date'
SORT_MODES = (SORT_BY_STOCK, SORT_BY_DATE)


def new_trade_id(now: Optional[float] = None) -> str:
    """Generate a timestamp-derived trade id (milliseconds since epoch)."""
    if now is None:
        now = time.time()
    return str(int(now * 1000))


def round_price(value: float) -> float:
    """Round to two decimals, ties away from zero on the exact binary value."""
    return float(Decimal(value).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP))


def parse_iso_date(value: str) -> Optional[datetime]:
    """Parse a stored ISO-8601 date, returning None if it is not one."""
    if not value:
        return None
    text = value.strip()
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


@dataclass(frozen=True)
class Trade:
    """Represents a single buy or sell entry."""
    id: str
    stock_name: str
    type: str
    price: float
    quantity: int
    date: str
    strategy: str

    @property
    def is_buy(self) -> bool:
        return self.type == BUY

    @property
    def is_sell(self) -> bool:
        return self.type == SELL

    @property
    def trade_date(self) -> Optional[datetime]:
        return parse_iso_date(self.date)

    def to_dict(self) -> Dict[str, Any]:
        """Convert trade to its stored JSON shape."""
        return {
            'id': self.id,
            'stockName': self.stock_name,
            'type': self.type,
            'price': self.price,
            'quantity': self.quantity,
            'date': self.date,
            'strategy': self.strategy,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Trade':
        """Create Trade from its stored JSON shape.

        Values are kept as stored so that re-serializing a loaded trade
        yields the same JSON.
        """
        return cls(
            id=data['id'],
            stock_name=data['stockName'],
            type=data['type'],
            price=data['price'],
            quantity=data['quantity'],
            date=data['date'],
            strategy=data['strategy'],
        )

    def __str__(self) -> str:
        """String representation of a trade."""
        return f"Trade(id='{self.id}', stock_name='{self.stock_name}', type='{self.type}', price={self.price}, quantity={self.quantity}, date='{self.date}', strategy='{self.strategy}')"


@dataclass(frozen=True)
class StockStats:
    """Summary statistics for the trades of one stock."""
    total_buy_qty: int = 0
    total_buy_value: float = 0
    total_sell_qty: int = 0
    total_sell_value: float = 0
    avg_buy_price: float = 0
    avg_sell_price: float = 0
    total_qty: int = 0
    total_invested: float = 0
    pnl: float = 0


@dataclass(frozen=True)
class StockSummary:
    """One row of the trade summary: a stock group and its statistics."""
    stock_name: str
    trade_count: int
    stats: StockStats

    def to_dict(self) -> Dict[str, Any]:
        return {
            'stockName': self.stock_name,
            'trades': self.trade_count,
            'totalQty': self.stats.total_qty,
            'avgBuyPrice': self.stats.avg_buy_price,
            'avgSellPrice': self.stats.avg_sell_price,
            'totalInvested': round_price(self.stats.total_invested),
            'pnl': round_price(self.stats.pnl),
        }
