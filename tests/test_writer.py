"""Tests for trade export and import files."""

import pandas as pd
import pytest

from tickr_book.aggregation import summarize
from tickr_book.errors import StorageError, ValidationError
from tickr_book.models import Trade
from tickr_book.reader import load_trades_from_csv, load_trades_from_parquet
from tickr_book.writer import save_summaries_to_csv, save_trades_to_csv, save_trades_to_parquet

TRADES = [
    Trade(id="1717200000000", stock_name="TCS", type="Buy", price=100.0, quantity=10,
          date="2024-06-01T00:00:00.000Z", strategy="Intraday"),
    Trade(id="1717200000001", stock_name="TCS", type="Sell", price=120.0, quantity=4,
          date="2024-06-02T00:00:00.000Z", strategy="Swing"),
]


def test_csv_export_and_import(tmp_path):
    """Test trades written to CSV load back unchanged."""
    path = str(tmp_path / "trades.csv")
    save_trades_to_csv(TRADES, path)
    assert list(pd.read_csv(path).columns) == ["id", "stockName", "type", "price", "quantity", "date", "strategy"]
    assert load_trades_from_csv(path) == TRADES


def test_parquet_export_and_import(tmp_path):
    """Test trades written to Parquet load back unchanged."""
    path = str(tmp_path / "trades.parquet")
    save_trades_to_parquet(TRADES, path)
    assert load_trades_from_parquet(path) == TRADES


def test_summary_export(tmp_path):
    """Test the per-stock summary CSV."""
    path = str(tmp_path / "summary.csv")
    save_summaries_to_csv(summarize(TRADES), path)
    df = pd.read_csv(path)
    assert df["stockName"].tolist() == ["TCS"]
    assert df["pnl"].tolist() == [80.0]
    assert df["totalInvested"].tolist() == [1000.0]


def test_summary_export_keeps_integer_quantity(tmp_path):
    """Test the summary CSV writes quantities without a decimal point."""
    path = tmp_path / "summary.csv"
    save_summaries_to_csv(summarize(TRADES), str(path))
    assert path.read_text(encoding="utf-8").splitlines()[1].startswith("TCS,2,10,")


def write_csv(path, rows):
    header = "id,stockName,type,price,quantity,date,strategy"
    path.write_text("\n".join([header] + rows) + "\n", encoding="utf-8")


def test_csv_import_validates_rows(tmp_path):
    """Test imported rows are checked like typed-in trades."""
    path = tmp_path / "bad.csv"
    write_csv(path, ["1,TCS,Buy,100,,2024-01-01T00:00:00.000Z,Intraday"])
    with pytest.raises(ValidationError, match="Row 1"):
        load_trades_from_csv(str(path))

    write_csv(path, ["1,TCS,Hold,100,1,2024-01-01T00:00:00.000Z,Intraday"])
    with pytest.raises(ValidationError):
        load_trades_from_csv(str(path))

    write_csv(path, ["1,TCS,Buy,abc,1,2024-01-01T00:00:00.000Z,Intraday"])
    with pytest.raises(ValidationError):
        load_trades_from_csv(str(path))


def test_csv_import_canonicalizes_choices(tmp_path):
    """Test trade type and strategy are matched case-insensitively on import."""
    path = tmp_path / "trades.csv"
    write_csv(path, ["7,TCS,buy,100,3,2024-01-01T00:00:00.000Z,swing"])
    [trade] = load_trades_from_csv(str(path))
    assert trade.type == "Buy"
    assert trade.strategy == "Swing"
    assert trade.quantity == 3


def test_csv_import_missing_columns(tmp_path):
    """Test a file without the trade columns raises StorageError."""
    path = tmp_path / "other.csv"
    path.write_text("symbol,qty\nTCS,1\n", encoding="utf-8")
    with pytest.raises(StorageError):
        load_trades_from_csv(str(path))


def test_unreadable_import_file(tmp_path):
    """Test missing or malformed files raise StorageError."""
    with pytest.raises(StorageError):
        load_trades_from_csv(str(tmp_path / "missing.csv"))
    junk = tmp_path / "junk.parquet"
    junk.write_bytes(b"not parquet")
    with pytest.raises(StorageError):
        load_trades_from_parquet(str(junk))
