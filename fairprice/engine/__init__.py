'''Fair price engine with pure math functions.'''

from fairprice.engine.price import (
    blend_final_price,
    compute_valuation,
    derive_earnings_per_share,
    derive_growth_rate,
    validate_dividends,
)

__all__ = [
    'compute_valuation',
    'derive_earnings_per_share',
    'derive_growth_rate',
    'validate_dividends',
    'blend_final_price',
]
