'''
Single-analysis entrypoint.

This module provides the main entry point for computing a fair buy price. It:
1. Builds an immutable ValuationInput from raw field values
2. Runs the pure engine
3. Optionally persists the snapshot for an identified user
4. Exports folders to PDF

Usage:
  python -m fairprice.run --ticker PETR4 --eps 2.50 --book-value 12.30 \\
      --current-profit 1000000000 --profit-5y-ago 500000000 \\
      --dividends 0.5 0.5 0.5 0.5 0.5

  python -m fairprice.run --ticker PETR4 \\
      --profits 10 10 10 10 10 --shares 100 ... --save --user alice

  python -m fairprice.run --user alice --export-folder all --out all.pdf
'''

import argparse
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Tuple

from fairprice.config import AppConfig
from fairprice.domain.types import EpsMode
from fairprice.domain.types import ValuationInput
from fairprice.domain.types import ValuationResult
from fairprice.engine.price import compute_valuation
from fairprice.report.formatting import format_currency
from fairprice.report.formatting import format_percent
from fairprice.report.pdf import export_folder_pdf
from fairprice.store.records import AnalysisRecord
from fairprice.store.repository import AnalysisStore
from fairprice.store.repository import RecordNotFoundError

logger = logging.getLogger(__name__)


def run_valuation(
    inputs: ValuationInput,
    store: Optional[AnalysisStore] = None,
    user_id: Optional[str] = None,
    notes: str = '',
    folder_id: Optional[str] = None,
) -> Tuple[ValuationResult, Optional[AnalysisRecord]]:
  '''
  Compute a valuation and persist it when a user is identified.

  Args:
    inputs: Fully assembled valuation input
    store: Analysis store (persistence is skipped without one)
    user_id: Current user (persistence is skipped when None)
    notes: Free-text notes saved with the analysis
    folder_id: Folder to file the saved analysis under

  Returns:
    Tuple of (result, record); record is None when nothing was saved

  Raises:
    ValidationError: If the inputs cannot be valued (nothing is saved)
  '''
  result = compute_valuation(inputs)

  if store is None or not user_id:
    return result, None

  record = store.save_analysis(user_id,
                               inputs,
                               result,
                               notes=notes,
                               folder_id=folder_id)
  return result, record


def fields_from_args(args: argparse.Namespace) -> Dict[str, Any]:
  '''Collect raw field values from parsed CLI arguments.'''
  if args.eps_mode:
    mode = EpsMode.parse(args.eps_mode)
  elif args.profits:
    mode = EpsMode.FIVE_YEAR_AVERAGE
  else:
    mode = EpsMode.DIRECT

  fields: Dict[str, Any] = {
      'ticker': args.ticker or '',
      'eps_mode': mode,
      'eps': args.eps,
      'share_count': args.shares,
      'book_value_per_share': args.book_value,
      'current_profit': args.current_profit,
      'profit_five_years_ago': args.profit_5y_ago,
  }
  for i, value in enumerate(args.profits or [], 1):
    fields[f'profit_{i}'] = value
  for i, value in enumerate(args.dividends or [], 1):
    fields[f'dividend_{i}'] = value
  return fields


def log_result(inputs: ValuationInput, result: ValuationResult,
               config: AppConfig) -> None:
  '''Log a result the way the calculator screen shows it.'''

  def money(value: float) -> str:
    return format_currency(value, config.currency_symbol, config.decimals)

  separator = '=' * 70
  logger.info('\n%s', separator)
  logger.info('Fair Buy Price - %s', inputs.ticker or '(no ticker)')
  logger.info('EPS mode: %s', inputs.eps_mode.value)
  logger.info(separator)

  logger.info('\nDerived Inputs:')
  logger.info('  EPS: %s', money(result.earnings_per_share))
  logger.info('  Profit CAGR (5y): %s',
              format_percent(result.derived_growth_rate_percent))

  logger.info('\nComponent Values:')
  logger.info('  Graham: %s', money(result.graham_value))
  logger.info('  Growth projected: %s', money(result.growth_projected_value))
  logger.info('  Bazin (dividends): %s', money(result.dividend_yield_value))

  logger.info('\nFair Buy Price: %s', money(result.final_buy_price))
  logger.info('  (includes a 20%% safety margin)')
  logger.info('%s\n', separator)


def build_parser() -> argparse.ArgumentParser:
  parser = argparse.ArgumentParser(
      description='Compute a Graham/Bazin fair buy price')
  parser.add_argument('--config', type=Path, help='JSON settings file')
  parser.add_argument('--store-dir',
                      type=Path,
                      help='Override the analysis store directory')

  inputs = parser.add_argument_group('valuation inputs')
  inputs.add_argument('--ticker', type=str, help='Ticker label')
  inputs.add_argument('--eps-mode',
                      choices=[m.value for m in EpsMode],
                      help='Default: five_year_average if --profits given')
  inputs.add_argument('--eps', type=str, help='Earnings per share')
  inputs.add_argument('--profits',
                      nargs=5,
                      metavar='P',
                      help='Net profit of the last five years')
  inputs.add_argument('--shares', type=str, help='Shares outstanding')
  inputs.add_argument('--book-value', type=str, help='Book value per share')
  inputs.add_argument('--current-profit', type=str, help='Latest net profit')
  inputs.add_argument('--profit-5y-ago',
                      type=str,
                      help='Net profit five years ago')
  inputs.add_argument('--dividends',
                      nargs=5,
                      metavar='D',
                      help='Dividends per share of the last five years')

  saving = parser.add_argument_group('saving and export')
  saving.add_argument('--user', type=str, help='User id owning saved data')
  saving.add_argument('--save',
                      action='store_true',
                      help='Save the analysis (requires --user)')
  saving.add_argument('--folder', type=str, help='Folder id to save into')
  saving.add_argument('--notes', type=str, default='', help='Notes to save')
  saving.add_argument('--export-folder',
                      type=str,
                      help="Folder id to export, or 'all' (requires --user)")
  saving.add_argument('--out', type=Path, help='PDF output path')
  return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
  '''CLI entrypoint.'''
  parser = build_parser()
  args = parser.parse_args(argv)

  config = AppConfig.load(args.config) if args.config else AppConfig.default()
  logging.getLogger().setLevel(config.logging_level)
  store_dir = args.store_dir or config.store_path
  store = AnalysisStore(store_dir)

  if args.export_folder:
    if not args.user or not args.out:
      parser.error('--export-folder requires --user and --out')
    folder_id = None if args.export_folder == 'all' else args.export_folder
    try:
      export_folder_pdf(store, args.user, folder_id, args.out, config)
    except RecordNotFoundError as e:
      parser.exit(2, f'{e}\n')
    return

  if args.save and not args.user:
    parser.error('--save requires --user')

  try:
    inputs = ValuationInput.from_fields(fields_from_args(args))
    result, record = run_valuation(
        inputs,
        store=store if args.save else None,
        user_id=args.user,
        notes=args.notes,
        folder_id=args.folder,
    )
  except (ValueError, RecordNotFoundError) as e:
    parser.exit(2, f'{e}\n')

  log_result(inputs, result, config)
  if record is not None:
    logger.info('Saved as %s', record.id)


if __name__ == '__main__':
  logging.basicConfig(
      level=logging.INFO,
      format='%(message)s',
  )
  main()
