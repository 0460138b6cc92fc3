"""Tests for data models."""

from datetime import datetime, timezone

from tickr_book.models import BUY, SELL, Trade, new_trade_id


def make_trade(**overrides):
    fields = dict(
        id="1717200000000",
        stock_name="TCS",
        type=BUY,
        price=3850.5,
        quantity=10,
        date="2024-06-01T00:00:00.000Z",
        strategy="Swing",
    )
    fields.update(overrides)
    return Trade(**fields)


def test_trade_creation():
    """Test Trade object creation."""
    trade = make_trade()
    assert trade.id == "1717200000000"
    assert trade.stock_name == "TCS"
    assert trade.type == "Buy"
    assert trade.price == 3850.5
    assert trade.quantity == 10
    assert trade.strategy == "Swing"
    assert trade.is_buy
    assert not trade.is_sell
    assert make_trade(type=SELL).is_sell


def test_trade_string_representation():
    """Test Trade string representation."""
    expected = ("Trade(id='1717200000000', stock_name='TCS', type='Buy', price=3850.5, quantity=10, "
                "date='2024-06-01T00:00:00.000Z', strategy='Swing')")
    assert str(make_trade()) == expected


def test_trade_dict_shape():
    """Test the stored JSON shape uses the camelCase field names."""
    assert make_trade().to_dict() == {
        'id': "1717200000000",
        'stockName': "TCS",
        'type': "Buy",
        'price': 3850.5,
        'quantity': 10,
        'date': "2024-06-01T00:00:00.000Z",
        'strategy': "Swing",
    }


def test_from_dict_keeps_stored_values():
    """Test loading does not coerce numbers or reformat the date."""
    data = {
        'id': "1", 'stockName': "infy", 'type': "Sell", 'price': 100,
        'quantity': 4, 'date': "2024-01-05", 'strategy': "Intraday",
    }
    trade = Trade.from_dict(data)
    assert trade.to_dict() == data
    assert isinstance(trade.to_dict()['price'], int)


def test_trade_date_parsing():
    """Test ISO dates parse with and without a UTC suffix."""
    assert make_trade().trade_date == datetime(2024, 6, 1, tzinfo=timezone.utc)
    assert make_trade(date="2024-06-01").trade_date == datetime(2024, 6, 1)
    assert make_trade(date="not a date").trade_date is None


def test_new_trade_id():
    """Test ids are millisecond timestamps."""
    assert new_trade_id(1717200000.123) == "1717200000123"
    assert new_trade_id().isdigit()
