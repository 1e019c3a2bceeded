"""Formatting and PDF export of saved analyses."""

from fairprice.report.formatting import format_currency
from fairprice.report.formatting import format_percent
from fairprice.report.pdf import export_analyses_pdf
from fairprice.report.pdf import export_folder_pdf

__all__ = [
    'format_currency',
    'format_percent',
    'export_analyses_pdf',
    'export_folder_pdf',
]
