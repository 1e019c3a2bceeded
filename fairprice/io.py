"""
I/O utilities for the analysis store.

Provides ParquetWriter for writing DataFrames with metadata sidecar files.
"""

from datetime import datetime
from datetime import timezone
import json
from pathlib import Path
from typing import Any, Optional

import pandas as pd


def utc_now_iso() -> str:
  """Return current UTC time in ISO format."""
  return datetime.now(timezone.utc).isoformat()


class ParquetWriter:
  """Write DataFrames to Parquet with metadata sidecar."""

  def write(
      self,
      df: pd.DataFrame,
      out_path: Path,
      *,
      metadata: Optional[dict[str, Any]] = None,
  ) -> None:
    """
    Write DataFrame to Parquet with sidecar metadata.

    The table is written to a temporary file first and moved into place,
    so readers never see a half-written table.

    Args:
      df: DataFrame to write
      out_path: Output path
      metadata: Additional metadata
    """
    out_path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = out_path.with_suffix(out_path.suffix + '.tmp')
    df.to_parquet(tmp_path, index=False)
    tmp_path.replace(out_path)

    meta = {
        'generated_at_utc': utc_now_iso(),
        'output': str(out_path),
        'nrows': int(len(df)),
        'ncols': int(df.shape[1]),
        'columns': list(df.columns),
    }

    if metadata:
      meta.update(metadata)

    meta_path = out_path.with_suffix(out_path.suffix + '.meta.json')
    meta_json = json.dumps(meta, ensure_ascii=False, indent=2)
    meta_path.write_text(meta_json, encoding='utf-8')


def read_parquet(path: Path, columns: list[str]) -> pd.DataFrame:
  """Read a table, returning an empty frame with columns if it is absent."""
  if not path.exists():
    return pd.DataFrame(columns=columns)
  return pd.read_parquet(path)
