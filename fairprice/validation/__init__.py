"""Ordered field validation for valuation inputs."""

from fairprice.validation.fields import CheckResult
from fairprice.validation.fields import first_failure
from fairprice.validation.fields import NonNegativeField
from fairprice.validation.fields import PositiveField
from fairprice.validation.fields import RequiredField
from fairprice.validation.fields import run_checks

__all__ = [
    'CheckResult',
    'RequiredField',
    'PositiveField',
    'NonNegativeField',
    'first_failure',
    'run_checks',
]
