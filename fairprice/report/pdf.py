'''
PDF export of saved analyses.

Renders a list of analyses as paged tables (one row per analysis) followed
by the full text of any notes, using matplotlib's PDF backend.

Usage:
  python -m fairprice.run --export-folder <folder_id> --user alice \\
      --out reports/defensive.pdf
'''

import logging
from pathlib import Path
import textwrap
from typing import List, Optional, Sequence

from matplotlib.backends.backend_pdf import PdfPages
import matplotlib.pyplot as plt

from fairprice.config import AppConfig
from fairprice.report.formatting import format_currency
from fairprice.report.formatting import format_date
from fairprice.report.formatting import format_percent
from fairprice.store.records import AnalysisRecord
from fairprice.store.repository import AnalysisStore

logger = logging.getLogger(__name__)

PAGE_SIZE = (11.69, 8.27)  # A4 landscape, inches
NOTE_PREVIEW_CHARS = 30
NOTE_WRAP_CHARS = 110
NOTE_LINES_PER_PAGE = 40

TABLE_COLUMNS = [
    'Ticker',
    'Date',
    'Graham',
    'Growth proj.',
    'Bazin',
    'Buy price',
    'Growth',
    'Notes',
]


def _chunks(items: Sequence, size: int) -> List[Sequence]:
  return [items[i:i + size] for i in range(0, len(items), size)]


def _escape(text: str) -> str:
  '''Keep dollar signs literal (matplotlib treats $...$ as math).'''
  return text.replace('$', r'\$')


def _table_row(record: AnalysisRecord, config: AppConfig) -> List[str]:
  '''One table row for an analysis.'''
  result = record.result

  def money(value: float) -> str:
    return format_currency(value, config.currency_symbol, config.decimals)

  notes = record.notes.replace('\n', ' ')
  if len(notes) > NOTE_PREVIEW_CHARS:
    notes = notes[:NOTE_PREVIEW_CHARS - 3] + '...'

  cells = [
      record.ticker,
      format_date(record.created_at),
      money(result.graham_value),
      money(result.growth_projected_value),
      money(result.dividend_yield_value),
      money(result.final_buy_price),
      format_percent(result.derived_growth_rate_percent),
      notes,
  ]
  return [_escape(c) for c in cells]


def _note_lines(records: Sequence[AnalysisRecord]) -> List[str]:
  '''Wrapped lines of every non-empty note, headed by ticker and date.'''
  lines: List[str] = []
  for record in records:
    if not record.notes.strip():
      continue
    lines.append(f'{record.ticker} ({format_date(record.created_at)})')
    for paragraph in record.notes.splitlines():
      lines.extend(textwrap.wrap(paragraph, NOTE_WRAP_CHARS) or [''])
    lines.append('')
  return lines


def export_analyses_pdf(
    records: Sequence[AnalysisRecord],
    out_path: Path,
    title: str = 'Saved analyses',
    config: Optional[AppConfig] = None,
) -> int:
  '''
  Write analyses to a PDF document.

  Args:
    records: Analyses in display order
    out_path: Output PDF path (parent directories are created)
    title: Heading printed on every page
    config: Display settings (currency, decimals, rows per page)

  Returns:
    Number of pages written
  '''
  if config is None:
    config = AppConfig.default()

  out_path.parent.mkdir(parents=True, exist_ok=True)
  pages = 0

  with PdfPages(out_path, metadata={'Title': title}) as pdf:
    table_pages = _chunks(list(records), config.rows_per_page) or [[]]
    for page_no, page_records in enumerate(table_pages, 1):
      fig = plt.figure(figsize=PAGE_SIZE)
      fig.suptitle(f'{title} ({page_no}/{len(table_pages)})', fontsize=14)
      ax = fig.add_subplot(111)
      ax.axis('off')

      if page_records:
        rows = [_table_row(r, config) for r in page_records]
        table = ax.table(cellText=rows, colLabels=TABLE_COLUMNS,
                         loc='upper center')
        table.auto_set_font_size(False)
        table.set_fontsize(8)
        table.scale(1.0, 1.3)
      else:
        ax.text(0.5, 0.5, 'No analyses to export', ha='center', va='center',
                fontsize=12)

      fig.text(0.5, 0.03,
               'Buy price = ((Graham + Growth proj. x 1.5 + Bazin x 0.5) / 3)'
               ' x 0.8 (20% safety margin)',
               ha='center', fontsize=8)
      pdf.savefig(fig)
      plt.close(fig)
      pages += 1

    for chunk in _chunks(_note_lines(records), NOTE_LINES_PER_PAGE):
      fig = plt.figure(figsize=PAGE_SIZE)
      fig.suptitle(f'{title}: notes', fontsize=14)
      fig.text(0.05,
               0.9,
               _escape('\n'.join(chunk)),
               va='top',
               family='monospace',
               fontsize=8)
      pdf.savefig(fig)
      plt.close(fig)
      pages += 1

  logger.info('Exported %d analyses to %s (%d pages)', len(records), out_path,
              pages)
  return pages


def export_folder_pdf(
    store: AnalysisStore,
    user_id: str,
    folder_id: Optional[str],
    out_path: Path,
    config: Optional[AppConfig] = None,
) -> int:
  '''
  Export one folder of a user (or all analyses with folder_id=None).

  Raises:
    RecordNotFoundError: If folder_id is not one of the user's folders
  '''
  if folder_id is None:
    title = 'All analyses'
  else:
    title = store.get_folder(user_id, folder_id).name

  records = store.list_analyses(user_id, folder_id=folder_id)
  return export_analyses_pdf(records, out_path, title=title, config=config)
