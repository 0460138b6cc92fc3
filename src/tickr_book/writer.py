"""Trade data writer module."""

import logging
from typing import List

import duckdb
import pandas as pd

from .errors import StorageError
from .models import StockSummary, Trade

logger = logging.getLogger(__name__)

TRADE_COLUMNS = ['id', 'stockName', 'type', 'price', 'quantity', 'date', 'strategy']
SUMMARY_COLUMNS = ['stockName', 'trades', 'totalQty', 'avgBuyPrice', 'avgSellPrice', 'totalInvested', 'pnl']


def trades_to_dataframe(trades: List[Trade]) -> pd.DataFrame:
    return pd.DataFrame([t.to_dict() for t in trades], columns=TRADE_COLUMNS)


def save_trades_to_csv(trades: List[Trade], output_file: str) -> None:
    """Save trades to a CSV file."""
    logger.info(f"Saving {len(trades)} trades to {output_file}")
    df = trades_to_dataframe(trades)
    df.to_csv(output_file, index=False)
    logger.info(f"Successfully saved trades to {output_file}")


def save_trades_to_parquet(trades: List[Trade], output_file: str) -> None:
    """Save trades to a Parquet file."""
    logger.info(f"Saving {len(trades)} trades to {output_file}")
    df = trades_to_dataframe(trades)

    # Use DuckDB to save to Parquet with compression
    con = duckdb.connect(database=':memory:')
    try:
        con.register('trades_df', df)
        target = output_file.replace("'", "''")
        con.execute(f"""
            COPY (SELECT * FROM trades_df)
            TO '{target}' (FORMAT 'parquet', COMPRESSION 'ZSTD')
        """)
    except duckdb.Error as e:
        logger.error(f"Error saving trades: {e}")
        raise StorageError(f"Cannot write {output_file}: {e}") from e
    finally:
        con.close()
    logger.info(f"Successfully saved trades to {output_file}")


def save_summaries_to_csv(summaries: List[StockSummary], output_file: str) -> None:
    """Save the per-stock summary table to a CSV file."""
    logger.info(f"Saving {len(summaries)} stock summaries to {output_file}")
    df = pd.DataFrame([s.to_dict() for s in summaries], columns=SUMMARY_COLUMNS)
    df.to_csv(output_file, index=False)
    logger.info(f"Successfully saved summaries to {output_file}")
