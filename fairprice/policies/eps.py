'''
Earnings per share policies.

EPS either comes straight from the user (DIRECT) or is derived from five
years of net profit divided by the share count (FIVE_YEAR_AVERAGE).
'''

from abc import ABC, abstractmethod

from fairprice.domain.types import N_YEARS, PolicyOutput, ValuationInput
from fairprice.validation.fields import first_failure
from fairprice.validation.fields import item
from fairprice.validation.fields import PositiveField
from fairprice.validation.fields import RequiredField


class EpsPolicy(ABC):
  '''
  Base class for EPS policies.

  Subclasses implement compute() to return earnings per share or raise a
  ValidationError naming the first unusable field.
  '''

  @abstractmethod
  def compute(self, data: ValuationInput) -> PolicyOutput[float]:
    '''
    Compute earnings per share.

    Args:
      data: Valuation input

    Returns:
      PolicyOutput with EPS and diagnostics

    Raises:
      ValidationError: If a required field is missing or invalid
    '''


class DirectEps(EpsPolicy):
  '''EPS entered directly by the user. Sign is not checked.'''

  VALIDATORS = [RequiredField('earnings_per_share', lambda d: d.eps_direct)]

  def compute(self, data: ValuationInput) -> PolicyOutput[float]:
    first_failure(self.VALIDATORS, data)
    return PolicyOutput(value=float(data.eps_direct),
                        diag={'eps_method': 'direct'})


class FiveYearAverageEps(EpsPolicy):
  '''
  Average annual profit over five years divided by the share count.

  Profits are checked in order (year 1 to 5), then the share count. A
  share count of zero or less is rejected.
  '''

  VALIDATORS = [
      RequiredField(f'annual_profits[{i}]', item('annual_profits', i))
      for i in range(N_YEARS)
  ] + [PositiveField('share_count')]

  def compute(self, data: ValuationInput) -> PolicyOutput[float]:
    first_failure(self.VALIDATORS, data)

    profits = [float(p) for p in data.annual_profits]
    avg_profit = sum(profits) / N_YEARS
    eps = avg_profit / data.share_count

    return PolicyOutput(value=eps,
                        diag={
                            'eps_method': 'five_year_average',
                            'avg_profit': avg_profit,
                            'share_count': float(data.share_count),
                        })
