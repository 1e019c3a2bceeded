import math

import pytest

from fairprice.domain.types import EpsMode
from fairprice.domain.types import is_present
from fairprice.domain.types import parse_number
from fairprice.domain.types import PolicyOutput
from fairprice.domain.types import ValuationInput
from fairprice.domain.types import ValuationResult


class TestParseNumber:

  @pytest.mark.parametrize('raw, expected', [
      ('2.50', 2.5),
      (' 12.3 ', 12.3),
      ('2,50', 2.5),
      ('-1', -1.0),
      ('1e9', 1e9),
      (3, 3.0),
      (0.5, 0.5),
  ])
  def test_valid(self, raw, expected):
    """Numbers and numeric text parse to floats."""
    assert parse_number(raw) == expected

  @pytest.mark.parametrize(
      'raw', [None, '', '   ', 'abc', '1,000,000', 'nan', 'inf', True,
              float('nan'), float('inf')])
  def test_absent(self, raw):
    """Blank, non-numeric and non-finite values are absent."""
    assert parse_number(raw) is None


class TestIsPresent:

  def test_finite(self):
    assert is_present(0.0)
    assert is_present(-3.5)

  def test_absent(self):
    assert not is_present(None)
    assert not is_present(math.nan)
    assert not is_present(-math.inf)


class TestEpsMode:

  @pytest.mark.parametrize('raw', [
      EpsMode.FIVE_YEAR_AVERAGE, 'five_year_average', 'FIVE_YEAR_AVERAGE',
      ' Five_Year_Average '
  ])
  def test_parse(self, raw):
    """Members, values and names are accepted."""
    assert EpsMode.parse(raw) is EpsMode.FIVE_YEAR_AVERAGE

  def test_parse_unknown(self):
    """Unknown modes list the available ones."""
    with pytest.raises(ValueError, match='Available'):
      EpsMode.parse('ttm')


class TestPolicyOutput:

  def test_default_diag(self):
    """Diag defaults to an empty, per-instance dict."""
    a = PolicyOutput(value=1.0)
    b = PolicyOutput(value=2.0)
    a.diag['x'] = 1

    assert b.diag == {}


class TestValuationInput:

  def test_defaults(self):
    """Defaults to direct mode with all values absent."""
    data = ValuationInput()

    assert data.ticker == ''
    assert data.eps_mode is EpsMode.DIRECT
    assert data.annual_profits == (None,) * 5
    assert data.dividends == (None,) * 5

  def test_ticker_normalized(self):
    """Ticker is stripped and upper-cased."""
    assert ValuationInput(ticker=' petr4 ').ticker == 'PETR4'

  def test_ticker_too_long(self):
    """Tickers longer than ten characters are rejected."""
    with pytest.raises(ValueError, match='Ticker'):
      ValuationInput(ticker='ABCDEFGHIJK')

  def test_short_sequences_padded(self):
    """Short yearly sequences are padded with absent values."""
    data = ValuationInput(dividends=(1.0, 2.0))

    assert data.dividends == (1.0, 2.0, None, None, None)

  def test_long_sequences_rejected(self):
    """More than five yearly values is an error."""
    with pytest.raises(ValueError, match='at most 5'):
      ValuationInput(annual_profits=(1.0,) * 6)

  def test_mode_from_string(self):
    """eps_mode accepts its string value."""
    data = ValuationInput(eps_mode='five_year_average')

    assert data.eps_mode is EpsMode.FIVE_YEAR_AVERAGE

  def test_immutable(self, direct_input):
    """Inputs cannot be mutated after construction."""
    with pytest.raises(AttributeError):
      direct_input.eps_direct = 3.0

  def test_from_fields(self):
    """Raw form fields are parsed; unusable numbers become None."""
    data = ValuationInput.from_fields({
        'ticker': 'vale3',
        'eps_mode': 'five_year_average',
        'eps': '',
        'profit_1': '10',
        'profit_2': '20',
        'profit_3': 'abc',
        'share_count': '100',
        'book_value_per_share': '12,30',
        'dividend_1': '0.5',
    })

    assert data.ticker == 'VALE3'
    assert data.eps_mode is EpsMode.FIVE_YEAR_AVERAGE
    assert data.eps_direct is None
    assert data.annual_profits == (10.0, 20.0, None, None, None)
    assert data.share_count == 100.0
    assert data.book_value_per_share == pytest.approx(12.3)
    assert data.current_profit is None
    assert data.dividends == (0.5, None, None, None, None)

  def test_from_fields_blank_mode(self):
    """Blank or NaN mode falls back to direct."""
    assert ValuationInput.from_fields({'eps_mode': ''
                                      }).eps_mode is EpsMode.DIRECT
    assert ValuationInput.from_fields({'eps_mode': float('nan')
                                      }).eps_mode is EpsMode.DIRECT

  def test_to_dict_inverts_from_fields(self, average_input):
    """to_dict produces fields that rebuild the same input."""
    assert ValuationInput.from_fields(
        average_input.to_dict()) == average_input


class TestValuationResult:

  def test_to_dict_includes_diag(self):
    """Diagnostics are merged into the flat dictionary."""
    result = ValuationResult(
        graham_value=1.0,
        growth_projected_value=2.0,
        dividend_yield_value=3.0,
        final_buy_price=4.0,
        derived_growth_rate_percent=5.0,
        earnings_per_share=6.0,
        diag={'ticker': 'X'},
    )

    row = result.to_dict()

    assert row['final_buy_price'] == 4.0
    assert row['earnings_per_share'] == 6.0
    assert row['ticker'] == 'X'
