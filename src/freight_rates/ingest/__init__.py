"""Ingest subpackage - spreadsheet export parsing."""
from .dates import normalize_date
from .import_pipeline import ImportPipeline, import_batch

__all__ = ['normalize_date', 'ImportPipeline', 'import_batch']
