'''Display formatting for money, percentages and timestamps.'''

from datetime import datetime
from math import isfinite


def format_currency(value: float, symbol: str = 'R$', decimals: int = 2) -> str:
  '''
  Format a money value with a currency prefix and thousands separators.

  Example: format_currency(-1234.5) -> '-R$ 1,234.50'
  '''
  if not isfinite(value):
    return 'n/a'
  sign = '-' if value < 0 else ''
  return f'{sign}{symbol} {abs(value):,.{decimals}f}'


def format_percent(value: float, decimals: int = 2) -> str:
  '''Format a percentage given in percent units (14.87 -> '14.87%').'''
  if not isfinite(value):
    return 'n/a'
  return f'{value:.{decimals}f}%'


def format_date(iso_timestamp: str) -> str:
  '''Date part of an ISO 8601 timestamp, or the raw text if unparsable.'''
  try:
    return datetime.fromisoformat(iso_timestamp).date().isoformat()
  except (TypeError, ValueError):
    return str(iso_timestamp)
