'''
Records kept by the analysis store.

An AnalysisRecord is a snapshot of one computation (inputs plus result)
with the user's notes and an optional folder. Records are flattened to one
row per analysis for parquet storage.
'''

from dataclasses import dataclass
import json
from typing import Any, Dict, Optional

import pandas as pd

from fairprice.domain.types import N_YEARS
from fairprice.domain.types import ValuationInput
from fairprice.domain.types import ValuationResult

RESULT_COLUMNS = [
    'graham_value',
    'growth_projected_value',
    'dividend_yield_value',
    'final_buy_price',
    'derived_growth_rate_percent',
    'earnings_per_share',
]

INPUT_COLUMNS = (['ticker', 'eps_mode', 'eps'] +
                 [f'profit_{i}' for i in range(1, N_YEARS + 1)] + [
                     'share_count',
                     'book_value_per_share',
                     'current_profit',
                     'profit_five_years_ago',
                 ] + [f'dividend_{i}' for i in range(1, N_YEARS + 1)])

ANALYSIS_COLUMNS = (['id', 'user_id', 'folder_id', 'notes', 'created_at',
                     'updated_at'] + INPUT_COLUMNS + RESULT_COLUMNS +
                    ['diag_json'])

FOLDER_COLUMNS = ['id', 'user_id', 'name', 'created_at']


def _opt_str(value: Any) -> Optional[str]:
  '''Stored text or None (parquet nulls may come back as NaN).'''
  if value is None or (not isinstance(value, str) and pd.isna(value)):
    return None
  return str(value)


@dataclass
class AnalysisFolder:
  '''
  Named folder grouping a user's analyses.

  Attributes:
    id: Folder identifier
    user_id: Owner
    name: Display name
    created_at: UTC creation timestamp (ISO 8601)
  '''
  id: str
  user_id: str
  name: str
  created_at: str

  def to_row(self) -> Dict[str, Any]:
    return {
        'id': self.id,
        'user_id': self.user_id,
        'name': self.name,
        'created_at': self.created_at,
    }

  @classmethod
  def from_row(cls, row: Dict[str, Any]) -> 'AnalysisFolder':
    return cls(
        id=str(row['id']),
        user_id=str(row['user_id']),
        name=str(row['name']),
        created_at=str(row['created_at']),
    )


@dataclass
class AnalysisRecord:
  '''
  Stored valuation snapshot.

  Attributes:
    id: Record identifier
    user_id: Owner
    inputs: Inputs the valuation was computed from
    result: Computed valuation
    notes: Free-text notes
    folder_id: Folder the analysis is filed under (None if unfiled)
    created_at: UTC creation timestamp (ISO 8601)
    updated_at: UTC timestamp of the last notes/folder change
  '''
  id: str
  user_id: str
  inputs: ValuationInput
  result: ValuationResult
  notes: str = ''
  folder_id: Optional[str] = None
  created_at: str = ''
  updated_at: Optional[str] = None

  @property
  def ticker(self) -> str:
    return self.inputs.ticker

  def to_row(self) -> Dict[str, Any]:
    '''Flatten to one storage row.'''
    row: Dict[str, Any] = {
        'id': self.id,
        'user_id': self.user_id,
        'folder_id': self.folder_id,
        'notes': self.notes,
        'created_at': self.created_at,
        'updated_at': self.updated_at,
    }
    row.update(self.inputs.to_dict())
    for col in RESULT_COLUMNS:
      row[col] = float(getattr(self.result, col))
    row['diag_json'] = json.dumps(self.result.diag, default=str)
    return row

  @classmethod
  def from_row(cls, row: Dict[str, Any]) -> 'AnalysisRecord':
    '''Rebuild a record from a storage row.'''
    diag_json = _opt_str(row.get('diag_json'))
    result = ValuationResult(
        diag=json.loads(diag_json) if diag_json else {},
        **{col: float(row[col]) for col in RESULT_COLUMNS},
    )
    return cls(
        id=str(row['id']),
        user_id=str(row['user_id']),
        inputs=ValuationInput.from_fields(row),
        result=result,
        notes=_opt_str(row.get('notes')) or '',
        folder_id=_opt_str(row.get('folder_id')),
        created_at=str(row['created_at']),
        updated_at=_opt_str(row.get('updated_at')),
    )
