"""Trade store: the trade list and stock-name registry over a key-value store."""

import json
import logging
import time
import datetime as dt
from typing import Iterable, List, Optional, Union

from .errors import StorageError, ValidationError
from .models import ALL, BUY, INTRADAY, STRATEGIES, TRADE_TYPES, Trade, new_trade_id
from .storage import KeyValueStore
from .utils import parse_choice, parse_price, parse_quantity, to_iso_string

logger = logging.getLogger(__name__)

TRADES_KEY = 'trades'
STOCK_LIST_KEY = 'stockList'


def _dumps(value) -> str:
    return json.dumps(value, separators=(',', ':'), ensure_ascii=False)


class TradeStore:
    """Reads and replaces the full trade list on every operation."""

    def __init__(self, kv: KeyValueStore):
        self.kv = kv

    def load_all(self, strict: bool = False) -> List[Trade]:
        """Load every trade.

        Nothing stored loads as an empty list. A value that cannot be decoded
        also loads as an empty list, unless ``strict`` is set, in which case
        StorageError is raised so that a caller about to write does not
        overwrite the undecodable data.
        """
        raw = self.kv.get_item(TRADES_KEY)
        if not raw:
            return []
        try:
            trades = [Trade.from_dict(t) for t in json.loads(raw)]
        except (json.JSONDecodeError, KeyError, TypeError) as e:
            if strict:
                logger.error(f"Stored trades could not be decoded: {e}")
                raise StorageError(f"Stored trades could not be decoded: {e}") from e
            logger.warning(f"Stored trades could not be decoded, treating as empty: {e}")
            return []
        logger.debug(f"Loaded {len(trades)} trades")
        return trades

    def save_all(self, trades: Iterable[Trade]) -> None:
        """Replace the stored trade list."""
        data = [t.to_dict() for t in trades]
        self.kv.set_item(TRADES_KEY, _dumps(data))
        logger.debug(f"Saved {len(data)} trades")

    def load_stock_names(self, strict: bool = False) -> List[str]:
        raw = self.kv.get_item(STOCK_LIST_KEY)
        if not raw:
            return []
        try:
            names = json.loads(raw)
            if not isinstance(names, list):
                raise TypeError("stock list is not a list")
        except (json.JSONDecodeError, TypeError) as e:
            if strict:
                logger.error(f"Stored stock list could not be decoded: {e}")
                raise StorageError(f"Stored stock list could not be decoded: {e}") from e
            logger.warning(f"Stored stock list could not be decoded, treating as empty: {e}")
            return []
        return [str(n) for n in names]

    def save_stock_names(self, names: Iterable[str]) -> None:
        unique = list(dict.fromkeys(names))
        self.kv.set_item(STOCK_LIST_KEY, _dumps(unique))

    def _register_stock_names(self, names: List[str], new: Iterable[str]) -> None:
        added = [n for n in dict.fromkeys(new) if n not in names]
        if added:
            self.save_stock_names(names + added)
            logger.info(f"Registered new stock names: {', '.join(added)}")

    def add_trade(self,
                  stock_name: str,
                  price: Union[str, float],
                  quantity: Union[str, int],
                  date: Union[str, dt.date, dt.datetime, None],
                  trade_type: str = BUY,
                  strategy: str = INTRADAY,
                  now: Optional[float] = None) -> Trade:
        """Validate user input, append the new trade and register its stock name.

        Raises:
            ValidationError: if a required field is missing or not numeric.
                Nothing is written in that case.
            StorageError: if the stored trades or stock list cannot be
                decoded. They are left untouched.
        """
        missing = [field for field, value in (('stockName', stock_name),
                                              ('quantity', quantity),
                                              ('price', price),
                                              ('date', date))
                   if value is None or (isinstance(value, str) and not value.strip())]
        if missing:
            raise ValidationError(f"Please fill all required fields: {', '.join(missing)}")

        trade_type = parse_choice(trade_type, TRADE_TYPES, 'trade type')
        trade_strategy = parse_choice(strategy, STRATEGIES, 'strategy')
        parsed_price = parse_price(price)
        parsed_quantity = parse_quantity(quantity)
        iso_date = to_iso_string(date)

        trades = self.load_all(strict=True)
        names = self.load_stock_names(strict=True)
        existing_ids = {t.id for t in trades}
        stamp = time.time() if now is None else now
        trade_id = new_trade_id(stamp)
        while trade_id in existing_ids:
            trade_id = str(int(trade_id) + 1)

        trade = Trade(
            id=trade_id,
            stock_name=stock_name,
            type=trade_type,
            price=parsed_price,
            quantity=parsed_quantity,
            date=iso_date,
            strategy=trade_strategy,
        )
        trades.append(trade)
        self.save_all(trades)
        logger.info(f"Added {trade.type} {trade.quantity} {trade.stock_name} @ {trade.price}")

        self._register_stock_names(names, [stock_name])
        return trade

    def delete_trades_for_stock(self, stock_name: str, strategy: str = ALL) -> int:
        """Delete every trade for a stock, or only those of one strategy."""
        trades = self.load_all(strict=True)
        everything = strategy is None or strategy.lower() == ALL.lower()

        def doomed(t: Trade) -> bool:
            if t.stock_name != stock_name:
                return False
            return everything or t.strategy.lower() == strategy.lower()

        remaining = [t for t in trades if not doomed(t)]
        removed = len(trades) - len(remaining)
        self.save_all(remaining)
        if everything:
            logger.info(f"Deleted all {removed} trades for {stock_name}")
        else:
            logger.info(f"Deleted {removed} {strategy.upper()} trades for {stock_name}")
        return removed

    def delete_trade(self, trade_id: str) -> bool:
        """Delete a single trade by id."""
        trades = self.load_all(strict=True)
        remaining = [t for t in trades if t.id != trade_id]
        self.save_all(remaining)
        deleted = len(remaining) < len(trades)
        if deleted:
            logger.info(f"Deleted trade {trade_id}")
        else:
            logger.info(f"No trade with id {trade_id}")
        return deleted

    def suggest_stock_names(self, prefix: str) -> List[str]:
        """Autocomplete known stock names by case-insensitive prefix."""
        if not prefix:
            return []
        needle = prefix.lower()
        return [n for n in self.load_stock_names() if n.lower().startswith(needle)]

    def import_trades(self, imported: Iterable[Trade]) -> int:
        """Append trades whose ids are not stored yet; returns how many were added."""
        trades = self.load_all(strict=True)
        names = self.load_stock_names(strict=True)
        ids = {t.id for t in trades}
        added = []
        for trade in imported:
            if trade.id in ids:
                continue
            ids.add(trade.id)
            added.append(trade)
        if not added:
            logger.info("No new trades to import")
            return 0
        self.save_all(trades + added)
        self._register_stock_names(names, [t.stock_name for t in added])
        logger.info(f"Imported {len(added)} trades")
        return len(added)
