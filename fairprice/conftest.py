from pathlib import Path

import pytest

from fairprice.domain.types import EpsMode
from fairprice.domain.types import ValuationInput
from fairprice.engine.price import compute_valuation
from fairprice.store.repository import AnalysisStore


def _make_input(**overrides) -> ValuationInput:
  """Helper to create a valid direct-mode input with overrides."""
  values = dict(
      ticker='PETR4',
      eps_mode=EpsMode.DIRECT,
      eps_direct=2.50,
      book_value_per_share=12.30,
      current_profit=1_000_000_000.0,
      profit_five_years_ago=500_000_000.0,
      dividends=(0.5, 0.5, 0.5, 0.5, 0.5),
  )
  values.update(overrides)
  return ValuationInput(**values)


@pytest.fixture
def make_input():
  """Factory fixture for ValuationInput with overrides."""
  return _make_input


@pytest.fixture
def direct_input() -> ValuationInput:
  """Direct EPS scenario: EPS 2.50, BVPS 12.30, profit doubled in 5 years."""
  return _make_input()


@pytest.fixture
def average_input() -> ValuationInput:
  """Five-year average scenario equivalent to an EPS of 2.50."""
  return _make_input(
      eps_mode=EpsMode.FIVE_YEAR_AVERAGE,
      eps_direct=None,
      annual_profits=(250.0, 250.0, 250.0, 250.0, 250.0),
      share_count=100.0,
  )


@pytest.fixture
def store(tmp_path: Path) -> AnalysisStore:
  """Empty analysis store in a temporary directory."""
  return AnalysisStore(tmp_path / 'store')


@pytest.fixture
def saved_analysis(store, direct_input):
  """Store with one saved analysis for user 'alice'."""
  result = compute_valuation(direct_input)
  return store.save_analysis('alice', direct_input, result, notes='first')
