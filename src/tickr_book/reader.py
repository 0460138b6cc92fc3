"""Trade data reader module."""

import logging
from typing import List

import duckdb
import pandas as pd

from .errors import StorageError, ValidationError
from .models import STRATEGIES, TRADE_TYPES, Trade, parse_iso_date
from .utils import parse_choice, parse_price, parse_quantity

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ['id', 'stockName', 'type', 'price', 'quantity', 'date', 'strategy']


def _text(value) -> str:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return ''
    return str(value).strip()


def _trade_from_row(row: pd.Series, line: int) -> Trade:
    """Validate one imported row the same way user input is validated."""
    try:
        trade_id = _text(row['id'])
        stock_name = _text(row['stockName'])
        date = _text(row['date'])
        if not trade_id or not stock_name or not date:
            raise ValidationError("id, stockName and date are required")
        if parse_iso_date(date) is None:
            raise ValidationError(f"Invalid date: {date!r}")
        return Trade(
            id=trade_id,
            stock_name=stock_name,
            type=parse_choice(_text(row['type']), TRADE_TYPES, 'trade type'),
            price=parse_price(_text(row['price'])),
            quantity=parse_quantity(_text(row['quantity'])),
            date=date,
            strategy=parse_choice(_text(row['strategy']), STRATEGIES, 'strategy')
        )
    except ValidationError as e:
        raise ValidationError(f"Row {line}: {e}") from e


def _trades_from_dataframe(df: pd.DataFrame) -> List[Trade]:
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise StorageError(f"Missing columns: {', '.join(missing)}")
    return [_trade_from_row(row, i + 1) for i, (_, row) in enumerate(df.iterrows())]


def load_trades_from_csv(input_file: str) -> List[Trade]:
    """Load trades from a previously exported CSV file."""
    logger.info(f"Loading trades from {input_file}")
    try:
        df = pd.read_csv(input_file, dtype=str, keep_default_na=False)
    except (OSError, ValueError) as e:
        logger.error(f"Error reading trades: {e}")
        raise StorageError(f"Cannot read {input_file}: {e}") from e
    trades = _trades_from_dataframe(df)
    logger.info(f"Successfully loaded {len(trades)} trades from {input_file}")
    return trades


def load_trades_from_parquet(input_file: str) -> List[Trade]:
    """Load trades from a previously exported Parquet file."""
    logger.info(f"Loading trades from {input_file}")

    con = duckdb.connect(database=':memory:')
    try:
        df = con.execute("SELECT * FROM read_parquet(?)", [input_file]).df()
    except duckdb.Error as e:
        logger.error(f"Error reading trades: {e}")
        raise StorageError(f"Cannot read {input_file}: {e}") from e
    finally:
        con.close()

    trades = _trades_from_dataframe(df)
    logger.info(f"Successfully loaded {len(trades)} trades from {input_file}")
    return trades
