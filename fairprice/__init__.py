'''
Fair buy price calculator built on Graham and Bazin heuristics.

The package turns a handful of fundamental metrics into three component
valuations (Graham intrinsic value, growth-projected value, Bazin dividend
yield value) and blends them into one safety-margined buy price. Saved
analyses can be kept in a local store, grouped into folders and exported
to PDF.

Usage:
  from fairprice.domain.types import EpsMode, ValuationInput
  from fairprice.engine.price import compute_valuation

  inputs = ValuationInput(
      ticker='PETR4',
      eps_mode=EpsMode.DIRECT,
      eps_direct=2.50,
      book_value_per_share=12.30,
      current_profit=1_000_000_000,
      profit_five_years_ago=500_000_000,
      dividends=(0.5, 0.5, 0.5, 0.5, 0.5),
  )
  result = compute_valuation(inputs)
  print(f'Buy below: {result.final_buy_price:.2f}')
'''
