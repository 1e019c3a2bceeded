'''
Batch valuation for many tickers from a CSV file.

This module provides tools to:
1. Compute fair buy prices for every row of an input CSV
2. Keep going when a row is invalid, recording which field failed
3. Export results to CSV for further analysis

The input CSV uses the same column names as ValuationInput.from_fields:
ticker, eps_mode, eps, profit_1..profit_5, share_count,
book_value_per_share, current_profit, profit_five_years_ago,
dividend_1..dividend_5.

Usage (CLI):
  python -m fairprice.analysis.batch_valuation \
    --input data/watchlist.csv \
    --output results/watchlist_prices.csv \
    -v

Usage (Python API):
  from fairprice.analysis.batch_valuation import batch_valuation

  df = batch_valuation(pd.read_csv('watchlist.csv', dtype=str))
  df.to_csv('results.csv', index=False)
'''

import argparse
import logging
from pathlib import Path
from typing import Any, Dict

import pandas as pd

from fairprice.domain.errors import ValidationError
from fairprice.domain.types import ValuationInput
from fairprice.engine.price import compute_valuation

logger = logging.getLogger(__name__)

RESULT_FIELDS = [
    'earnings_per_share',
    'derived_growth_rate_percent',
    'graham_value',
    'growth_projected_value',
    'dividend_yield_value',
    'final_buy_price',
]


def _value_row(raw: Dict[str, Any]) -> Dict[str, Any]:
  '''Compute one row; invalid inputs yield NaN values and the error.'''
  ticker = raw.get('ticker')
  row: Dict[str, Any] = {
      'ticker': ticker.strip().upper() if isinstance(ticker, str) else ''
  }

  try:
    inputs = ValuationInput.from_fields(raw)
    result = compute_valuation(inputs)
  except ValueError as e:
    logger.warning('Skipping %s: %s', row['ticker'] or '<no ticker>', e)
    row.update({f: float('nan') for f in RESULT_FIELDS})
    if isinstance(e, ValidationError):
      row.update(e.to_dict())
    else:
      row.update({'error_kind': 'bad_row', 'error_field': None})
    return row

  row['ticker'] = inputs.ticker
  row.update({f: getattr(result, f) for f in RESULT_FIELDS})
  row.update({'error_kind': None, 'error_field': None})
  return row


def batch_valuation(inputs: pd.DataFrame,
                    verbose: bool = False) -> pd.DataFrame:
  '''
  Compute a valuation for every row of a DataFrame.

  Args:
    inputs: One row per ticker, columns as in ValuationInput.from_fields
    verbose: Log each computed price

  Returns:
    DataFrame with columns:
    - ticker: Ticker symbol
    - earnings_per_share, derived_growth_rate_percent
    - graham_value, growth_projected_value, dividend_yield_value
    - final_buy_price
    - error_kind, error_field: set when the row could not be valued

  Raises:
    ValueError: If inputs has no rows
  '''
  if inputs.empty:
    raise ValueError('No rows to value')

  rows = []
  records = inputs.to_dict(orient='records')
  for i, raw in enumerate(records, 1):
    row = _value_row(raw)
    rows.append(row)
    if verbose and row['error_kind'] is None:
      logger.info('[%d/%d] %s: buy below %.2f', i, len(records), row['ticker'],
                  row['final_buy_price'])

  return pd.DataFrame(rows, columns=['ticker'] + RESULT_FIELDS +
                      ['error_kind', 'error_field'])


def _print_summary(df: pd.DataFrame) -> None:
  '''Log summary statistics for batch valuation results.'''
  valued = df[df['error_kind'].isna()]
  failed = df[df['error_kind'].notna()]

  logger.info('')
  logger.info('=' * 70)
  logger.info('Summary Statistics')
  logger.info('=' * 70)
  logger.info('Total rows: %d', len(df))
  logger.info('Valued: %d', len(valued))
  logger.info('Failed: %d', len(failed))

  if not valued.empty:
    logger.info('')
    logger.info('Fair buy price:')
    logger.info('  Mean:   %.2f', valued['final_buy_price'].mean())
    logger.info('  Median: %.2f', valued['final_buy_price'].median())
    logger.info('  Min:    %.2f (%s)', valued['final_buy_price'].min(),
                valued.loc[valued['final_buy_price'].idxmin(), 'ticker'])
    logger.info('  Max:    %.2f (%s)', valued['final_buy_price'].max(),
                valued.loc[valued['final_buy_price'].idxmax(), 'ticker'])

  if not failed.empty:
    logger.info('')
    logger.info('Failures by field:')
    for field, count in failed['error_field'].value_counts().items():
      logger.info('  %s: %d', field, count)

  logger.info('=' * 70)


def main() -> None:
  '''CLI entrypoint.'''
  parser = argparse.ArgumentParser(
      description='Compute fair buy prices for every row of a CSV file')
  parser.add_argument('--input',
                      type=Path,
                      required=True,
                      help='Input CSV (one ticker per row)')
  parser.add_argument('--output',
                      type=Path,
                      required=True,
                      help='Output CSV path')
  parser.add_argument('-v',
                      '--verbose',
                      action='store_true',
                      help='Log each computed price')
  args = parser.parse_args()

  if not args.input.exists():
    raise FileNotFoundError(f'Input CSV not found: {args.input}')

  inputs = pd.read_csv(args.input, dtype=str)
  logger.info('Valuing %d rows from %s', len(inputs), args.input)

  df = batch_valuation(inputs, verbose=args.verbose)

  args.output.parent.mkdir(parents=True, exist_ok=True)
  df.to_csv(args.output, index=False)
  logger.info('Results written to %s', args.output)

  _print_summary(df)


if __name__ == '__main__':
  logging.basicConfig(
      level=logging.INFO,
      format='%(message)s',
  )
  main()
