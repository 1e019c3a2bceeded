"""Local store for saved analyses and folders."""

from fairprice.store.records import AnalysisFolder
from fairprice.store.records import AnalysisRecord
from fairprice.store.repository import AnalysisStore
from fairprice.store.repository import RecordNotFoundError

__all__ = [
    'AnalysisFolder',
    'AnalysisRecord',
    'AnalysisStore',
    'RecordNotFoundError',
]
