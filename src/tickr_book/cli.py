"""Command-line interface for Tickr Book."""

import argparse
import logging
import os
import sys
from datetime import date
from typing import List, Optional

from dotenv import load_dotenv

from .config import get_backend, get_backend_defaults, open_store
from .errors import StorageError, ValidationError
from .models import ALL, BUY, INTRADAY, SELL, SORT_BY_STOCK, SORT_MODES, STRATEGIES, Trade
from .reader import load_trades_from_csv, load_trades_from_parquet
from .store import TradeStore
from .utils import format_date, format_money
from .view import HistoryView
from .writer import save_summaries_to_csv, save_trades_to_csv, save_trades_to_parquet

# Configure logging
logging.basicConfig(
    level=os.getenv('LOG_LEVEL', 'INFO'),
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

STRATEGY_FILTERS = [ALL] + list(STRATEGIES)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='tickr-book', description='Log stock trades and review per-stock P/L')
    parser.add_argument('--backend', choices=['json', 'duckdb'], help='Storage backend (default: $TICKR_BOOK_BACKEND or json)')
    parser.add_argument('--path', help='Override default store location')
    sub = parser.add_subparsers(dest='command', required=True)

    add = sub.add_parser('add', help='Record a trade')
    add.add_argument('stock', help='Stock name')
    side = add.add_mutually_exclusive_group()
    side.add_argument('--buy', dest='trade_type', action='store_const', const=BUY, help='Buy trade (default)')
    side.add_argument('--sell', dest='trade_type', action='store_const', const=SELL, help='Sell trade')
    add.add_argument('--price', required=True, help='Price per share')
    add.add_argument('--quantity', required=True, help='Number of shares')
    add.add_argument('--date', default=None, help='Trade date, YYYY-MM-DD (default: today)')
    add.add_argument('--strategy', choices=list(STRATEGIES), default=INTRADAY, help='Trade strategy')
    add.set_defaults(trade_type=BUY)

    summary = sub.add_parser('summary', help='Show the per-stock trade summary')
    summary.add_argument('--strategy', choices=STRATEGY_FILTERS, default=ALL)
    summary.add_argument('--search', default='', help='Case-insensitive stock name filter')
    summary.add_argument('--sort', choices=list(SORT_MODES), default=SORT_BY_STOCK)

    show = sub.add_parser('show', help='Show the trades of one stock')
    show.add_argument('stock')
    show.add_argument('--strategy', choices=STRATEGY_FILTERS, default=ALL)

    delete = sub.add_parser('delete', help='Delete all trades of a stock')
    delete.add_argument('stock')
    delete.add_argument('--strategy', choices=STRATEGY_FILTERS, default=ALL,
                        help='Only delete trades of this strategy')

    delete_trade = sub.add_parser('delete-trade', help='Delete one trade by id')
    delete_trade.add_argument('trade_id')

    suggest = sub.add_parser('suggest', help='List known stock names starting with a prefix')
    suggest.add_argument('prefix')

    export = sub.add_parser('export', help='Export trades (use .parquet or .csv extension)')
    export.add_argument('output_file')
    export.add_argument('--summary', action='store_true', help='Export the per-stock summary as CSV instead')

    load = sub.add_parser('import', help='Import trades from a Parquet or CSV export')
    load.add_argument('input_file')
    return parser


def print_summary(view: HistoryView, trades: List[Trade]) -> None:
    summaries = view.render(trades)
    print("Trade Summary")
    if not summaries:
        print("No trades found.")
        return
    for s in summaries:
        stats = s.stats
        print(f"{s.stock_name}  Qty: {stats.total_qty:g}")
        print(f"  Avg Buy Price: {format_money(stats.avg_buy_price)}")
        print(f"  Avg Sell Price: {format_money(stats.avg_sell_price)}")
        print(f"  Total Invested: {format_money(stats.total_invested)}")
        print(f"  P/L: {format_money(stats.pnl)}")


def print_stock_trades(view: HistoryView, trades: List[Trade]) -> None:
    print(f"{view.selected_stock} - Trades")
    for t in view.render(trades):
        print(f"  [{t.id}] {t.type.upper():4} | Strategy: {t.strategy:8} | "
              f"Qty: {t.quantity} | Price: {format_money(float(t.price))} | Date: {format_date(t.date)}")


def run_command(args: argparse.Namespace, store: TradeStore) -> None:
    if args.command == 'add':
        trade = store.add_trade(
            stock_name=args.stock,
            price=args.price,
            quantity=args.quantity,
            date=args.date or date.today(),
            trade_type=args.trade_type,
            strategy=args.strategy,
        )
        print(f"Saved trade {trade.id}")
    elif args.command == 'summary':
        view = HistoryView(strategy=args.strategy, search=args.search, sort_by=args.sort)
        print_summary(view, store.load_all())
    elif args.command == 'show':
        view = HistoryView(strategy=args.strategy).select(args.stock)
        print_stock_trades(view, store.load_all())
    elif args.command == 'delete':
        removed = store.delete_trades_for_stock(args.stock, args.strategy)
        if args.strategy == ALL:
            print(f"Deleted all trades for {args.stock} ({removed})")
        else:
            print(f"Deleted {args.strategy.upper()} trades for {args.stock} ({removed})")
    elif args.command == 'delete-trade':
        if store.delete_trade(args.trade_id):
            print("Trade deleted successfully")
        else:
            print(f"No trade with id {args.trade_id}")
    elif args.command == 'suggest':
        for name in store.suggest_stock_names(args.prefix):
            print(name)
    elif args.command == 'export':
        if args.summary:
            save_summaries_to_csv(HistoryView().render(store.load_all()), args.output_file)
        elif args.output_file.endswith('.parquet'):
            save_trades_to_parquet(store.load_all(), args.output_file)
        else:
            save_trades_to_csv(store.load_all(), args.output_file)
    elif args.command == 'import':
        if args.input_file.endswith('.parquet'):
            trades = load_trades_from_parquet(args.input_file)
        else:
            trades = load_trades_from_csv(args.input_file)
        added = store.import_trades(trades)
        print(f"Imported {added} trades")


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the Tickr Book CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Load environment variables
    load_dotenv()

    backend = args.backend or get_backend()
    if not get_backend_defaults(backend):
        logger.error(f"Invalid backend: {backend}")
        logger.error("Supported backends: json, duckdb")
        sys.exit(1)

    try:
        kv = open_store(backend, args.path)
    except StorageError as e:
        logger.error(f"Error opening store: {e}")
        sys.exit(1)

    try:
        run_command(args, TradeStore(kv))
    except ValidationError as e:
        logger.error(f"Error: {e}")
        sys.exit(1)
    except StorageError as e:
        logger.error(f"Storage error: {e}")
        sys.exit(1)
    except OSError as e:
        logger.error(f"Error during {args.command}: {e}")
        sys.exit(1)
    finally:
        kv.close()


if __name__ == "__main__":
    main()
