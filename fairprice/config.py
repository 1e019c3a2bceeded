"""
Application settings.

AppConfig is a serializable (JSON-friendly) configuration class for the
parts of the application that are allowed to vary: where saved analyses
live, how money is displayed, and how PDF exports are paged. The valuation
constants are not configurable and live in engine/price.py.
"""

from dataclasses import asdict
from dataclasses import dataclass
from dataclasses import fields
import json
import logging
from pathlib import Path
from typing import Any


@dataclass
class AppConfig:
  """
  Configuration for the CLI, store and exports.

  Attributes:
    store_dir: Directory holding the analyses/folders parquet tables
    currency_symbol: Prefix used when formatting money (single currency)
    decimals: Decimal places shown for money values
    rows_per_page: Analyses per page in PDF exports
    log_level: Logging level name for CLI entry points
  """
  store_dir: str = 'data/store'
  currency_symbol: str = 'R$'
  decimals: int = 2
  rows_per_page: int = 20
  log_level: str = 'INFO'

  def __post_init__(self):
    if self.decimals < 0:
      raise ValueError(f'decimals must be >= 0, got {self.decimals}')
    if self.rows_per_page < 1:
      raise ValueError(f'rows_per_page must be >= 1, got {self.rows_per_page}')
    if not isinstance(logging.getLevelName(self.log_level.upper()), int):
      raise ValueError(f'Unknown log level: {self.log_level}')

  @classmethod
  def default(cls) -> 'AppConfig':
    """Create default configuration."""
    return cls()

  @property
  def store_path(self) -> Path:
    return Path(self.store_dir)

  @property
  def logging_level(self) -> int:
    return logging.getLevelName(self.log_level.upper())

  def to_dict(self) -> dict[str, Any]:
    """Convert to dictionary."""
    return asdict(self)

  def to_json(self) -> str:
    """Serialize to JSON string."""
    return json.dumps(self.to_dict(), indent=2)

  @classmethod
  def from_dict(cls, data: dict[str, Any]) -> 'AppConfig':
    """
    Create from dictionary.

    Raises:
      ValueError: If data contains keys that are not settings
    """
    known = {f.name for f in fields(cls)}
    unknown = set(data) - known
    if unknown:
      raise ValueError(f'Unknown config keys: {sorted(unknown)}. '
                       f'Available: {sorted(known)}')
    return cls(**data)

  @classmethod
  def from_json(cls, json_str: str) -> 'AppConfig':
    """Create from JSON string."""
    return cls.from_dict(json.loads(json_str))

  @classmethod
  def load(cls, path: Path) -> 'AppConfig':
    """Load from a JSON file."""
    if not path.exists():
      raise FileNotFoundError(f'Config file not found: {path}')
    return cls.from_json(path.read_text(encoding='utf-8'))
