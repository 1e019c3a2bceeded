'''
Domain types for the fair price calculator.

ValuationInput is assembled once per computation request and never mutated;
the engine reads it and returns a ValuationResult. Optional numeric fields
use None for "not provided", so a presentation layer can hand over exactly
what the user typed.
'''

from dataclasses import dataclass, field
import enum
from math import isfinite
from typing import Any, Dict, Generic, Mapping, Optional, Tuple, TypeVar

T = TypeVar('T')

N_YEARS = 5
MAX_TICKER_LENGTH = 10

OptionalFloats = Tuple[Optional[float], ...]


def is_present(value: Optional[float]) -> bool:
  '''True if value is a finite number (None, NaN and inf count as absent).'''
  return value is not None and isfinite(value)


def parse_number(raw: Any) -> Optional[float]:
  '''
  Parse a raw field value into a float.

  Empty strings, non-numeric text, NaN and infinities yield None. A single
  decimal comma ('2,50') is accepted.

  Args:
    raw: Value as typed by the user (str, int, float or None)

  Returns:
    Finite float or None
  '''
  if raw is None or isinstance(raw, bool):
    return None

  if isinstance(raw, (int, float)):
    value = float(raw)
  else:
    text = str(raw).strip()
    if not text:
      return None
    if text.count(',') == 1 and '.' not in text:
      text = text.replace(',', '.')
    try:
      value = float(text)
    except ValueError:
      return None

  return value if isfinite(value) else None


def _text(raw: Any) -> str:
  '''Raw text field, treating None and non-string blanks (NaN) as empty.'''
  return raw.strip() if isinstance(raw, str) else ''


def _pad(values: Optional[OptionalFloats]) -> OptionalFloats:
  '''Normalise a yearly sequence to exactly N_YEARS entries.'''
  values = tuple(values or ())
  if len(values) > N_YEARS:
    raise ValueError(f'Expected at most {N_YEARS} yearly values, '
                     f'got {len(values)}')
  return values + (None,) * (N_YEARS - len(values))


class EpsMode(enum.Enum):
  '''How earnings per share are obtained.'''
  DIRECT = 'direct'
  FIVE_YEAR_AVERAGE = 'five_year_average'

  @classmethod
  def parse(cls, raw: Any) -> 'EpsMode':
    '''Accept a member, its value ('direct') or its name ('DIRECT').'''
    if isinstance(raw, cls):
      return raw
    text = str(raw).strip()
    try:
      return cls(text.lower())
    except ValueError:
      pass
    try:
      return cls[text.upper()]
    except KeyError as e:
      raise ValueError(f"Unknown EPS mode: '{raw}'. "
                       f'Available: {[m.value for m in cls]}') from e


@dataclass
class PolicyOutput(Generic[T]):
  '''
  Standard output from any policy.

  Attributes:
    value: The computed value (type depends on policy)
    diag: Dictionary of diagnostic information
  '''
  value: T
  diag: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ValuationInput:
  '''
  Fundamental inputs for a single valuation request.

  Attributes:
    ticker: Stock ticker, used only as a label
    eps_mode: DIRECT uses eps_direct; FIVE_YEAR_AVERAGE derives EPS from
      annual_profits and share_count
    eps_direct: Earnings per share entered directly
    annual_profits: Net profit of each of the last five years
    share_count: Shares outstanding
    book_value_per_share: Book value per share
    current_profit: Most recent annual net profit
    profit_five_years_ago: Net profit five years before current_profit
    dividends: Dividends per share paid in each of the last five years
  '''
  ticker: str = ''
  eps_mode: EpsMode = EpsMode.DIRECT
  eps_direct: Optional[float] = None
  annual_profits: OptionalFloats = (None,) * N_YEARS
  share_count: Optional[float] = None
  book_value_per_share: Optional[float] = None
  current_profit: Optional[float] = None
  profit_five_years_ago: Optional[float] = None
  dividends: OptionalFloats = (None,) * N_YEARS

  def __post_init__(self):
    ticker = (self.ticker or '').strip().upper()
    if len(ticker) > MAX_TICKER_LENGTH:
      raise ValueError(f'Ticker longer than {MAX_TICKER_LENGTH} characters: '
                       f'{ticker!r}')
    object.__setattr__(self, 'ticker', ticker)
    object.__setattr__(self, 'eps_mode', EpsMode.parse(self.eps_mode))
    object.__setattr__(self, 'annual_profits', _pad(self.annual_profits))
    object.__setattr__(self, 'dividends', _pad(self.dividends))

  @classmethod
  def from_fields(cls, fields: Mapping[str, Any]) -> 'ValuationInput':
    '''
    Build an input from raw form fields.

    Recognised keys: ticker, eps_mode, eps, profit_1..profit_5, share_count,
    book_value_per_share, current_profit, profit_five_years_ago,
    dividend_1..dividend_5. Missing or unparsable numbers become None so
    that the engine reports them as missing fields.
    '''
    mode = fields.get('eps_mode')
    if not isinstance(mode, EpsMode):
      mode = _text(mode) or EpsMode.DIRECT
    return cls(
        ticker=_text(fields.get('ticker')),
        eps_mode=EpsMode.parse(mode),
        eps_direct=parse_number(fields.get('eps')),
        annual_profits=tuple(
            parse_number(fields.get(f'profit_{i}'))
            for i in range(1, N_YEARS + 1)),
        share_count=parse_number(fields.get('share_count')),
        book_value_per_share=parse_number(fields.get('book_value_per_share')),
        current_profit=parse_number(fields.get('current_profit')),
        profit_five_years_ago=parse_number(fields.get('profit_five_years_ago')),
        dividends=tuple(
            parse_number(fields.get(f'dividend_{i}'))
            for i in range(1, N_YEARS + 1)),
    )

  def to_dict(self) -> Dict[str, Any]:
    '''Flatten to a single-level dictionary (inverse of from_fields).'''
    row: Dict[str, Any] = {
        'ticker': self.ticker,
        'eps_mode': self.eps_mode.value,
        'eps': self.eps_direct,
    }
    for i, profit in enumerate(self.annual_profits, 1):
      row[f'profit_{i}'] = profit
    row.update({
        'share_count': self.share_count,
        'book_value_per_share': self.book_value_per_share,
        'current_profit': self.current_profit,
        'profit_five_years_ago': self.profit_five_years_ago,
    })
    for i, dividend in enumerate(self.dividends, 1):
      row[f'dividend_{i}'] = dividend
    return row


@dataclass
class ValuationResult:
  '''
  Complete valuation result with diagnostics.

  Attributes:
    graham_value: sqrt(10.5 * EPS * BVPS)
    growth_projected_value: EPS * (7 + 2 * growth / 100)
    dividend_yield_value: Sum of dividends / 0.3
    final_buy_price: Weighted blend with 20% safety margin
    derived_growth_rate_percent: Five-year profit CAGR, in percent
    earnings_per_share: EPS actually used by the formulas
    diag: Merged diagnostics from all policies
  '''
  graham_value: float
  growth_projected_value: float
  dividend_yield_value: float
  final_buy_price: float
  derived_growth_rate_percent: float
  earnings_per_share: float
  diag: Dict[str, Any] = field(default_factory=dict)

  def to_dict(self) -> Dict[str, Any]:
    '''Convert to dictionary for DataFrame creation.'''
    result = {
        'graham_value': self.graham_value,
        'growth_projected_value': self.growth_projected_value,
        'dividend_yield_value': self.dividend_yield_value,
        'final_buy_price': self.final_buy_price,
        'derived_growth_rate_percent': self.derived_growth_rate_percent,
        'earnings_per_share': self.earnings_per_share,
    }
    result.update(self.diag)
    return result
