'''
Local analysis store.

Saved analyses and folders are kept in two parquet tables under a base
directory. Every operation is keyed by user_id; records owned by another
user behave exactly like records that do not exist.

Usage:
  from fairprice.store.repository import AnalysisStore

  store = AnalysisStore(Path('data/store'))
  folder = store.create_folder('user-1', 'Defensive stocks')
  record = store.save_analysis('user-1', inputs, result,
                               notes='Cheap vs peers', folder_id=folder.id)
  for rec in store.list_analyses('user-1', search='petr'):
    print(rec.ticker, rec.result.final_buy_price)
'''

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional
import uuid

import pandas as pd

from fairprice.domain.types import ValuationInput
from fairprice.domain.types import ValuationResult
from fairprice.io import ParquetWriter
from fairprice.io import read_parquet
from fairprice.io import utc_now_iso
from fairprice.store.records import ANALYSIS_COLUMNS
from fairprice.store.records import AnalysisFolder
from fairprice.store.records import AnalysisRecord
from fairprice.store.records import FOLDER_COLUMNS

logger = logging.getLogger(__name__)

NO_FOLDER_NAME = 'No folder'
MISSING_FOLDER_NAME = 'Folder not found'


class RecordNotFoundError(KeyError):
  '''Analysis or folder id unknown for this user.'''

  def __str__(self) -> str:
    return str(self.args[0]) if self.args else ''


def _newest_first(rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
  '''Sort by created_at descending; later inserts win ties.'''
  ordered = sorted(enumerate(rows),
                   key=lambda pair: (str(pair[1]['created_at']), pair[0]),
                   reverse=True)
  return [row for _, row in ordered]


class AnalysisStore:
  '''Parquet-backed store of analyses and folders.'''

  def __init__(self, base_dir: Path, writer: Optional[ParquetWriter] = None):
    self.base_dir = Path(base_dir)
    self.writer = writer or ParquetWriter()

  @property
  def analyses_path(self) -> Path:
    return self.base_dir / 'analyses.parquet'

  @property
  def folders_path(self) -> Path:
    return self.base_dir / 'folders.parquet'

  def _load(self, path: Path, columns: List[str]) -> List[Dict[str, Any]]:
    df = read_parquet(path, columns)
    return df.to_dict(orient='records')

  def _save(self, path: Path, columns: List[str],
            rows: List[Dict[str, Any]]) -> None:
    df = pd.DataFrame(rows, columns=columns)
    self.writer.write(df, path, metadata={'table': path.stem})

  def _load_analyses(self) -> List[Dict[str, Any]]:
    return self._load(self.analyses_path, ANALYSIS_COLUMNS)

  def _save_analyses(self, rows: List[Dict[str, Any]]) -> None:
    self._save(self.analyses_path, ANALYSIS_COLUMNS, rows)

  def _load_folders(self) -> List[Dict[str, Any]]:
    return self._load(self.folders_path, FOLDER_COLUMNS)

  def _save_folders(self, rows: List[Dict[str, Any]]) -> None:
    self._save(self.folders_path, FOLDER_COLUMNS, rows)

  # Analyses

  def save_analysis(
      self,
      user_id: str,
      inputs: ValuationInput,
      result: ValuationResult,
      notes: str = '',
      folder_id: Optional[str] = None,
  ) -> AnalysisRecord:
    '''
    Persist a valuation snapshot.

    Args:
      user_id: Owner of the analysis
      inputs: Inputs used for the computation
      result: Computed valuation
      notes: Free-text notes
      folder_id: Optional folder to file the analysis under

    Returns:
      Stored AnalysisRecord with id and creation timestamp

    Raises:
      RecordNotFoundError: If folder_id is not one of the user's folders
    '''
    if folder_id is not None:
      self.get_folder(user_id, folder_id)

    record = AnalysisRecord(
        id=uuid.uuid4().hex,
        user_id=user_id,
        inputs=inputs,
        result=result,
        notes=notes or '',
        folder_id=folder_id,
        created_at=utc_now_iso(),
    )

    rows = self._load_analyses()
    rows.append(record.to_row())
    self._save_analyses(rows)

    logger.info('Saved analysis %s (%s) for user %s', record.id,
                record.ticker, user_id)
    return record

  def get_analysis(self, user_id: str, analysis_id: str) -> AnalysisRecord:
    '''
    Fetch one analysis.

    Raises:
      RecordNotFoundError: If the id is unknown for this user
    '''
    for row in self._load_analyses():
      if row['id'] == analysis_id and row['user_id'] == user_id:
        return AnalysisRecord.from_row(row)
    raise RecordNotFoundError(f'Analysis not found: {analysis_id}')

  def list_analyses(
      self,
      user_id: str,
      folder_id: Optional[str] = None,
      search: Optional[str] = None,
  ) -> List[AnalysisRecord]:
    '''
    List a user's analyses, newest first.

    Args:
      user_id: Owner
      folder_id: Only analyses filed under this folder (None: all)
      search: Case-insensitive ticker substring filter

    Returns:
      Matching records
    '''
    term = (search or '').strip().lower()
    rows = [
        row for row in self._load_analyses()
        if row['user_id'] == user_id and
        (folder_id is None or row['folder_id'] == folder_id) and
        term in str(row['ticker']).lower()
    ]
    return [AnalysisRecord.from_row(row) for row in _newest_first(rows)]

  def delete_analysis(self, user_id: str, analysis_id: str) -> None:
    '''
    Delete one analysis.

    Raises:
      RecordNotFoundError: If the id is unknown for this user
    '''
    rows = self._load_analyses()
    kept = [
        row for row in rows
        if not (row['id'] == analysis_id and row['user_id'] == user_id)
    ]
    if len(kept) == len(rows):
      raise RecordNotFoundError(f'Analysis not found: {analysis_id}')
    self._save_analyses(kept)
    logger.info('Deleted analysis %s for user %s', analysis_id, user_id)

  def _update_analysis(self, user_id: str, analysis_id: str,
                       **changes: Any) -> AnalysisRecord:
    rows = self._load_analyses()
    for row in rows:
      if row['id'] == analysis_id and row['user_id'] == user_id:
        row.update(changes)
        row['updated_at'] = utc_now_iso()
        self._save_analyses(rows)
        return AnalysisRecord.from_row(row)
    raise RecordNotFoundError(f'Analysis not found: {analysis_id}')

  def update_notes(self, user_id: str, analysis_id: str,
                   notes: str) -> AnalysisRecord:
    '''Replace the notes of an analysis.'''
    return self._update_analysis(user_id, analysis_id, notes=notes or '')

  def move_to_folder(self, user_id: str, analysis_id: str,
                     folder_id: Optional[str]) -> AnalysisRecord:
    '''File an analysis under a folder, or unfile it with None.'''
    if folder_id is not None:
      self.get_folder(user_id, folder_id)
    return self._update_analysis(user_id, analysis_id, folder_id=folder_id)

  # Folders

  def create_folder(self, user_id: str, name: str) -> AnalysisFolder:
    '''
    Create a named folder.

    Raises:
      ValueError: If the name is blank
    '''
    name = (name or '').strip()
    if not name:
      raise ValueError('Folder name must not be empty')

    folder = AnalysisFolder(
        id=uuid.uuid4().hex,
        user_id=user_id,
        name=name,
        created_at=utc_now_iso(),
    )
    rows = self._load_folders()
    rows.append(folder.to_row())
    self._save_folders(rows)

    logger.info('Created folder %s (%s) for user %s', folder.id, name,
                user_id)
    return folder

  def get_folder(self, user_id: str, folder_id: str) -> AnalysisFolder:
    '''
    Fetch one folder.

    Raises:
      RecordNotFoundError: If the id is unknown for this user
    '''
    for row in self._load_folders():
      if row['id'] == folder_id and row['user_id'] == user_id:
        return AnalysisFolder.from_row(row)
    raise RecordNotFoundError(f'Folder not found: {folder_id}')

  def list_folders(self, user_id: str) -> List[AnalysisFolder]:
    '''List a user's folders, newest first.'''
    rows = [row for row in self._load_folders() if row['user_id'] == user_id]
    return [AnalysisFolder.from_row(row) for row in _newest_first(rows)]

  def delete_folder(self, user_id: str, folder_id: str) -> None:
    '''
    Delete a folder. Analyses filed under it are kept and become unfiled.

    Raises:
      RecordNotFoundError: If the id is unknown for this user
    '''
    rows = self._load_folders()
    kept = [
        row for row in rows
        if not (row['id'] == folder_id and row['user_id'] == user_id)
    ]
    if len(kept) == len(rows):
      raise RecordNotFoundError(f'Folder not found: {folder_id}')

    analyses = self._load_analyses()
    unfiled = 0
    for row in analyses:
      if row['user_id'] == user_id and row['folder_id'] == folder_id:
        row['folder_id'] = None
        row['updated_at'] = utc_now_iso()
        unfiled += 1
    if unfiled:
      self._save_analyses(analyses)
    self._save_folders(kept)

    logger.info('Deleted folder %s for user %s (%d analyses unfiled)',
                folder_id, user_id, unfiled)

  def folder_name(self, user_id: str, folder_id: Optional[str]) -> str:
    '''Display name for a folder id, including the unfiled case.'''
    if folder_id is None:
      return NO_FOLDER_NAME
    try:
      return self.get_folder(user_id, folder_id).name
    except RecordNotFoundError:
      return MISSING_FOLDER_NAME

  def folder_counts(self, user_id: str) -> Dict[Optional[str], int]:
    '''Number of analyses per folder id (None for unfiled).'''
    counts: Dict[Optional[str], int] = {}
    for record in self.list_analyses(user_id):
      counts[record.folder_id] = counts.get(record.folder_id, 0) + 1
    return counts
