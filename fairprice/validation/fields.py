"""
Ordered field validators for valuation inputs.

Each validator checks one field and returns a CheckResult. Validators are
kept in ordered lists so the first failing field is always the one reported,
matching the left-to-right order a user fills the form in.
"""
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional, Sequence

from fairprice.domain.errors import InvalidValueError
from fairprice.domain.errors import MissingFieldError
from fairprice.domain.errors import ValidationError
from fairprice.domain.types import is_present

Getter = Callable[[Any], Optional[float]]


@dataclass(frozen=True)
class CheckResult:
  """Result of a single field check."""

  name: str
  ok: bool
  details: str
  error: Optional[ValidationError] = None

  def __str__(self) -> str:
    status = '✓' if self.ok else '✗'
    return f'{status} {self.name}: {self.details}'


def pass_result(name: str, details: str) -> CheckResult:
  """Create a passing CheckResult."""
  return CheckResult(name=name, ok=True, details=details)


def fail_result(name: str, details: str,
                error: ValidationError) -> CheckResult:
  """Create a failing CheckResult carrying the error to raise."""
  return CheckResult(name=name, ok=False, details=details, error=error)


def attr(name: str) -> Getter:
  """Getter reading an attribute from the validated object."""
  return lambda obj: getattr(obj, name)


def item(attr_name: str, index: int) -> Getter:
  """Getter reading one entry of a sequence attribute."""
  return lambda obj: getattr(obj, attr_name)[index]


class RequiredField:
  """Field must be a finite number."""

  def __init__(self, name: str, getter: Optional[Getter] = None):
    self.name = name
    self.getter = getter or attr(name)

  def validate(self, obj: Any) -> CheckResult:
    value = self.getter(obj)
    if not is_present(value):
      return fail_result(self.name, 'missing or not a number',
                         MissingFieldError(self.name))
    return pass_result(self.name, f'{value}')


class PositiveField:
  """Field must be present and > 0 (or >= 0 with allow_zero)."""

  def __init__(
      self,
      name: str,
      getter: Optional[Getter] = None,
      allow_zero: bool = False,
      error_field: Optional[str] = None,
  ):
    self.name = name
    self.getter = getter or attr(name)
    self.allow_zero = allow_zero
    self.error_field = error_field or name

  def validate(self, obj: Any) -> CheckResult:
    value = self.getter(obj)
    if not is_present(value):
      return fail_result(self.name, 'missing or not a number',
                         MissingFieldError(self.name))

    if self.allow_zero:
      ok = value >= 0
      constraint = '>= 0'
    else:
      ok = value > 0
      constraint = '> 0'

    if not ok:
      return fail_result(self.name, f'{value} not {constraint}',
                         InvalidValueError(self.error_field))
    return pass_result(self.name, f'{value} {constraint}')


def NonNegativeField(  # pylint: disable=invalid-name
    name: str,
    getter: Optional[Getter] = None,
    error_field: Optional[str] = None,
) -> PositiveField:
  """Field must be present and >= 0."""
  return PositiveField(name, getter, allow_zero=True, error_field=error_field)


def run_checks(validators: Iterable[Any], obj: Any) -> list[CheckResult]:
  """Run every validator and return all results (for reporting)."""
  return [v.validate(obj) for v in validators]


def first_failure(validators: Sequence[Any], obj: Any) -> None:
  """
  Run validators in order and raise the error of the first failure.

  Args:
    validators: Ordered validators exposing validate(obj) -> CheckResult
    obj: Object passed to every validator

  Raises:
    ValidationError: From the first validator that fails
  """
  for validator in validators:
    result = validator.validate(obj)
    if not result.ok and result.error is not None:
      raise result.error
