"""
Pure fair price engine.

This module contains the valuation formulas and the validate-then-compute
pipeline. No pandas, no I/O, no logging: every function is a deterministic
function of its arguments and either returns a number or raises a
ValidationError.

Key functions:
  compute_valuation: Main entry point, ValuationInput -> ValuationResult
  derive_earnings_per_share: EPS from the direct figure or profit history
  derive_growth_rate: Five-year profit CAGR in percent
  validate_dividends: Presence and sign checks on the five dividends
"""

from collections.abc import Sequence
from math import sqrt
from typing import Optional

from fairprice.domain.errors import InvalidValueError
from fairprice.domain.types import N_YEARS
from fairprice.domain.types import ValuationInput
from fairprice.domain.types import ValuationResult
from fairprice.policies.registry import create_eps_policy
from fairprice.policies.registry import create_growth_policy
from fairprice.validation.fields import first_failure
from fairprice.validation.fields import item
from fairprice.validation.fields import NonNegativeField
from fairprice.validation.fields import RequiredField

GRAHAM_MULTIPLIER = 10.5
BASE_EARNINGS_MULTIPLE = 7.0
GROWTH_MULTIPLE = 2.0
BAZIN_YIELD = 0.3
GRAHAM_WEIGHT = 1.0
GROWTH_WEIGHT = 1.5
DIVIDEND_WEIGHT = 0.5
BLEND_DIVISOR = 3.0
SAFETY_MARGIN = 0.8

REQUIRED_FUNDAMENTALS = [
    RequiredField('book_value_per_share'),
    RequiredField('current_profit'),
    RequiredField('profit_five_years_ago'),
]

DIVIDEND_VALIDATORS = [
    RequiredField(f'dividends[{i}]', item('dividends', i))
    for i in range(N_YEARS)
] + [
    NonNegativeField(f'dividends[{i}]',
                     item('dividends', i),
                     error_field='dividends') for i in range(N_YEARS)
]


class _Dividends:
  '''Adapter so dividend validators can read a bare sequence.'''

  def __init__(self, dividends: Sequence[Optional[float]]):
    values = tuple(dividends)
    self.dividends = values + (None,) * (N_YEARS - len(values))


def validate_dividends(dividends: Sequence[Optional[float]]) -> None:
  '''
  Check the five yearly dividends.

  All entries are checked for presence first, then for sign, so a missing
  value is reported even when a later one is negative.

  Raises:
    MissingFieldError: 'dividends[i]' for the first absent entry
    InvalidValueError: 'dividends' for the first negative entry
  '''
  first_failure(DIVIDEND_VALIDATORS, _Dividends(dividends))


def derive_earnings_per_share(data: ValuationInput) -> float:
  '''
  EPS according to data.eps_mode.

  Raises:
    MissingFieldError: 'earnings_per_share', 'annual_profits[i]' or
      'share_count'
    InvalidValueError: 'share_count' if not > 0
  '''
  return create_eps_policy(data.eps_mode).compute(data).value


def derive_growth_rate(current_profit: Optional[float],
                       profit_five_years_ago: Optional[float]) -> float:
  '''
  Five-year compound annual growth rate of profit, in percent.

  ((current / five_years_ago) ** (1/5) - 1) * 100

  Raises:
    MissingFieldError: If either profit is absent
    InvalidValueError: 'profit_five_years_ago' if <= 0, 'current_profit'
      if < 0
  '''
  return create_growth_policy().compute(current_profit,
                                        profit_five_years_ago).value


def compute_graham_value(eps: float, book_value_per_share: float) -> float:
  '''
  Graham intrinsic value sqrt(10.5 * EPS * BVPS).

  Raises:
    InvalidValueError: 'graham_inputs' if the product is negative
  '''
  product = GRAHAM_MULTIPLIER * eps * book_value_per_share
  if product < 0:
    raise InvalidValueError('graham_inputs')
  return sqrt(product)


def compute_growth_projected_value(eps: float, growth_pct: float) -> float:
  '''EPS * (7 + 2 * growth), growth given in percent.'''
  return eps * (BASE_EARNINGS_MULTIPLE + GROWTH_MULTIPLE * (growth_pct / 100.0))


def compute_dividend_yield_value(dividends: Sequence[float]) -> float:
  '''Bazin value: sum of the dividends over a 0.3 yield.'''
  return sum(dividends) / BAZIN_YIELD


def blend_final_price(graham: float, growth_projected: float,
                      dividend_yield: float) -> float:
  '''Weighted average of the three values with the 20% safety margin.'''
  blended = (graham * GRAHAM_WEIGHT + growth_projected * GROWTH_WEIGHT +
             dividend_yield * DIVIDEND_WEIGHT) / BLEND_DIVISOR
  return blended * SAFETY_MARGIN


def compute_valuation(data: ValuationInput) -> ValuationResult:
  '''
  Validate inputs and compute the three valuations and the buy price.

  Steps, in order:
  1. book value, current profit and historical profit must be present
  2. dividends must be present and non-negative
  3. EPS is derived according to the EPS mode
  4. historical profit must be > 0
  5. growth rate is derived
  6. Graham, growth-projected and dividend-yield values
  7. blended, safety-margined buy price

  Args:
    data: Fully assembled valuation input

  Returns:
    ValuationResult with all intermediate values and diagnostics

  Raises:
    ValidationError: On the first failing rule; nothing is returned partially
  '''
  first_failure(REQUIRED_FUNDAMENTALS, data)
  validate_dividends(data.dividends)

  eps_result = create_eps_policy(data.eps_mode).compute(data)
  eps = eps_result.value

  if data.profit_five_years_ago <= 0:
    raise InvalidValueError('profit_five_years_ago')

  growth_result = create_growth_policy().compute(data.current_profit,
                                                 data.profit_five_years_ago)
  growth_pct = growth_result.value

  graham = compute_graham_value(eps, data.book_value_per_share)
  growth_projected = compute_growth_projected_value(eps, growth_pct)
  dividend_yield = compute_dividend_yield_value(
      [float(d) for d in data.dividends])
  final_price = blend_final_price(graham, growth_projected, dividend_yield)

  diag = {'ticker': data.ticker}
  diag.update({f'eps_{k}': v for k, v in eps_result.diag.items()})
  diag.update({f'growth_{k}': v for k, v in growth_result.diag.items()})

  return ValuationResult(
      graham_value=graham,
      growth_projected_value=growth_projected,
      dividend_yield_value=dividend_yield,
      final_buy_price=final_price,
      derived_growth_rate_percent=growth_pct,
      earnings_per_share=eps,
      diag=diag,
  )
