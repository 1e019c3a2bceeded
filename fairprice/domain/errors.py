'''
Error taxonomy for valuation inputs.

Every failure is deterministic for a given input: a required field is absent
(MISSING_FIELD) or a present field breaks a numeric business rule
(INVALID_VALUE). Both abort the computation; no partial result is produced.
'''

import enum


class ErrorKind(enum.Enum):
  '''Kind of validation failure.'''
  MISSING_FIELD = 'missing_field'
  INVALID_VALUE = 'invalid_value'


class ValidationError(ValueError):
  '''
  Raised when a valuation cannot be computed from the given inputs.

  Attributes:
    kind: ErrorKind of the failure
    field: Name of the offending field (e.g. 'book_value_per_share')
  '''

  def __init__(self, kind: ErrorKind, field: str, message: str = ''):
    self.kind = kind
    self.field = field
    super().__init__(message or self.default_message())

  def default_message(self) -> str:
    if self.kind is ErrorKind.MISSING_FIELD:
      return f'Cannot compute: provide {self.field}'
    return f'Invalid value for {self.field}'

  def to_dict(self) -> dict:
    '''Convert to dictionary for logging and DataFrame rows.'''
    return {'error_kind': self.kind.value, 'error_field': self.field}

  def __eq__(self, other: object) -> bool:
    if not isinstance(other, ValidationError):
      return NotImplemented
    return self.kind is other.kind and self.field == other.field

  def __hash__(self) -> int:
    return hash((self.kind, self.field))

  def __repr__(self) -> str:
    return f'{type(self).__name__}({self.field!r})'


class MissingFieldError(ValidationError):
  '''A required input was absent or non-numeric.'''

  def __init__(self, field: str, message: str = ''):
    super().__init__(ErrorKind.MISSING_FIELD, field, message)


class InvalidValueError(ValidationError):
  '''A present input violates a numeric business rule.'''

  def __init__(self, field: str, message: str = ''):
    super().__init__(ErrorKind.INVALID_VALUE, field, message)
