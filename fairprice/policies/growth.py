'''
Profit growth rate policy.

The growth-projected valuation needs the compound annual growth rate of net
profit across a fixed five-year span.
'''

from typing import Optional

from fairprice.domain.types import N_YEARS, PolicyOutput
from fairprice.validation.fields import first_failure
from fairprice.validation.fields import NonNegativeField
from fairprice.validation.fields import PositiveField
from fairprice.validation.fields import RequiredField


class FiveYearCAGR:
  '''
  CAGR of net profit over five years, in percent.

  The historical profit is the base of a fractional power, so it must be
  strictly positive. A negative current profit has no real fifth root of
  the ratio and is rejected as well; a zero current profit gives -100%.
  '''

  # Presence first, then the historical base, then the current sign.
  VALIDATORS = [
      RequiredField('current_profit', lambda p: p[0]),
      RequiredField('profit_five_years_ago', lambda p: p[1]),
      PositiveField('profit_five_years_ago', lambda p: p[1]),
      NonNegativeField('current_profit', lambda p: p[0]),
  ]

  def __init__(self, years: int = N_YEARS):
    self.years = years

  def compute(
      self,
      current_profit: Optional[float],
      profit_five_years_ago: Optional[float],
  ) -> PolicyOutput[float]:
    '''
    Compute the growth rate percentage.

    Args:
      current_profit: Most recent annual net profit
      profit_five_years_ago: Net profit at the start of the span

    Returns:
      PolicyOutput with growth in percent (14.87 means 14.87% a year)

    Raises:
      MissingFieldError: If either profit is absent
      InvalidValueError: If profit_five_years_ago <= 0 or current_profit < 0
    '''
    first_failure(self.VALIDATORS, (current_profit, profit_five_years_ago))

    ratio = current_profit / profit_five_years_ago
    growth_pct = (ratio**(1.0 / self.years) - 1.0) * 100.0

    return PolicyOutput(value=growth_pct,
                        diag={
                            'growth_method': 'cagr',
                            'growth_years': self.years,
                            'profit_ratio': ratio,
                        })
