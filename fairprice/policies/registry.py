"""
Policy registry mapping EPS modes to policy factories.

To add a new EPS mode:
1. Add a member to EpsMode in domain/types.py
2. Implement an EpsPolicy subclass in policies/eps.py
3. Register its factory in EPS_POLICIES
"""

from collections.abc import Callable

from fairprice.domain.types import EpsMode
from fairprice.policies.eps import DirectEps
from fairprice.policies.eps import EpsPolicy
from fairprice.policies.eps import FiveYearAverageEps
from fairprice.policies.growth import FiveYearCAGR

EPS_POLICIES: dict[EpsMode, Callable[[], EpsPolicy]] = {
    EpsMode.DIRECT: DirectEps,
    EpsMode.FIVE_YEAR_AVERAGE: FiveYearAverageEps,
}

GROWTH_POLICIES: dict[str, Callable[[], FiveYearCAGR]] = {
    'cagr_5y': lambda: FiveYearCAGR(years=5),
}


def create_eps_policy(mode: EpsMode) -> EpsPolicy:
  """
  Create the EPS policy for a mode.

  Raises:
    KeyError: If no policy is registered for the mode
  """
  try:
    factory = EPS_POLICIES[mode]
  except KeyError as e:
    raise KeyError(f"Unknown EPS mode: '{mode}'. "
                   f'Available: {[m.value for m in EPS_POLICIES]}') from e
  return factory()


def create_growth_policy(name: str = 'cagr_5y') -> FiveYearCAGR:
  """
  Create a growth policy by name.

  Raises:
    KeyError: If the name is not registered
  """
  try:
    factory = GROWTH_POLICIES[name]
  except KeyError as e:
    raise KeyError(f"Unknown growth policy: '{name}'. "
                   f'Available: {list(GROWTH_POLICIES.keys())}') from e
  return factory()
