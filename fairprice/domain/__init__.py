"""Domain types for the fair price calculator."""

from fairprice.domain.errors import ErrorKind
from fairprice.domain.errors import InvalidValueError
from fairprice.domain.errors import MissingFieldError
from fairprice.domain.errors import ValidationError
from fairprice.domain.types import EpsMode
from fairprice.domain.types import PolicyOutput
from fairprice.domain.types import ValuationInput
from fairprice.domain.types import ValuationResult

__all__ = [
    'EpsMode',
    'ValuationInput',
    'ValuationResult',
    'PolicyOutput',
    'ErrorKind',
    'ValidationError',
    'MissingFieldError',
    'InvalidValueError',
]
