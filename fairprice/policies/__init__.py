"""
Policies deriving the intermediate inputs of the valuation.

Each policy computes one intermediate figure (EPS, growth rate) and returns
both a value and diagnostic information, or raises a ValidationError naming
the first unusable field.

To add a new policy:
1. Create a class inheriting from the appropriate base (e.g., EpsPolicy)
2. Implement the compute() method returning PolicyOutput
3. Register in policies/registry.py
"""

from fairprice.policies.eps import DirectEps
from fairprice.policies.eps import EpsPolicy
from fairprice.policies.eps import FiveYearAverageEps
from fairprice.policies.growth import FiveYearCAGR

__all__ = [
    'EpsPolicy',
    'DirectEps',
    'FiveYearAverageEps',
    'FiveYearCAGR',
]
