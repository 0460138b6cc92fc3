"""Tests for the history view state."""

import pytest

from tickr_book.models import Trade
from tickr_book.view import HistoryView

TRADES = [
    Trade(id="1", stock_name="TCS", type="Buy", price=100, quantity=10,
          date="2024-01-01T00:00:00.000Z", strategy="Intraday"),
    Trade(id="2", stock_name="INFY", type="Buy", price=50, quantity=2,
          date="2024-02-01T00:00:00.000Z", strategy="Swing"),
    Trade(id="3", stock_name="TCS", type="Sell", price=120, quantity=4,
          date="2024-03-01T00:00:00.000Z", strategy="Swing"),
]


def test_defaults_show_stock_list():
    """Test the view starts on the stock list sorted by name."""
    view = HistoryView()
    assert not view.is_detail
    assert [s.stock_name for s in view.render(TRADES)] == ["INFY", "TCS"]


def test_select_and_back():
    """Test selecting a stock switches to its trades and back returns to the list."""
    view = HistoryView().select("TCS")
    assert view.is_detail
    assert [t.id for t in view.render(TRADES)] == ["1", "3"]
    assert not view.back().is_detail


def test_detail_applies_strategy_but_not_search():
    """Test the detail list is filtered by strategy only."""
    view = HistoryView().set_search("zzz").set_strategy("swing").select("TCS")
    assert view.strategy == "Swing"
    assert [t.id for t in view.render(TRADES)] == ["3"]


def test_toggle_sort():
    """Test the sort mode alternates between stock and date."""
    view = HistoryView().toggle_sort()
    assert view.sort_by == "date"
    assert [s.stock_name for s in view.render(TRADES)] == ["INFY", "TCS"]
    assert view.toggle_sort().sort_by == "stock"


def test_search_filter():
    """Test the search text narrows the stock list."""
    assert [s.stock_name for s in HistoryView().set_search("tc").render(TRADES)] == ["TCS"]
    assert HistoryView().set_search("nothing").render(TRADES) == []


def test_unknown_strategy():
    """Test an unknown strategy filter is rejected."""
    with pytest.raises(ValueError):
        HistoryView().set_strategy("Scalp")
