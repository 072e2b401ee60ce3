"""
Import Pipeline - Runs the row parser over a whole export.

The first line is always a header and is skipped. Blank lines are ignored.
Bad rows are counted and skipped; the batch is never aborted.
"""
from typing import Optional

import structlog

from ..config.settings import get_settings, Settings
from ..engine.driver_directory import DriverDirectory
from ..engine.models import ImportBatchResult, RowFailure
from ..engine.rate_resolver import RateResolver, get_resolver
from .csv_row_parser import CSVRowParser

logger = structlog.get_logger(__name__)


class ImportPipeline:
    """Drives CSVRowParser over decoded export text."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        directory: Optional[DriverDirectory] = None,
        resolver: Optional[RateResolver] = None,
    ):
        self.settings = settings or get_settings()
        self.directory = directory or DriverDirectory.from_csv(self.settings.drivers_csv)
        self.resolver = resolver or get_resolver()

    def run(self, text: str, facility: Optional[str] = None) -> ImportBatchResult:
        """
        Import every data line of ``text`` for one facility.

        Args:
            text: Decoded export contents
            facility: CDD applied to every row (defaults to settings.default_facility)

        Returns:
            ImportBatchResult with records in file order and row failures
        """
        if facility is None:
            facility = self.settings.default_facility
        parser = CSVRowParser(facility, self.directory, self.resolver, self.settings)
        result = ImportBatchResult()

        for i, raw_line in enumerate((text or '').split('\n')):
            if i == 0:
                continue
            line = raw_line.strip()
            if not line:
                continue

            parsed = parser.parse(line, line_number=i + 1)
            if isinstance(parsed, RowFailure):
                result.failures.append(parsed)
                logger.debug("import_row_skipped", line=parsed.line_number, reason=parsed.reason)
            else:
                result.records.append(parsed)

        logger.info(
            "import_finished",
            facility=facility,
            imported=result.success_count,
            skipped=result.failure_count,
        )
        return result


# Default pipeline instance
_pipeline: Optional[ImportPipeline] = None


def get_pipeline() -> ImportPipeline:
    """Get the global pipeline using the packaged roster and tariffs."""
    global _pipeline
    if _pipeline is None:
        _pipeline = ImportPipeline()
    return _pipeline


def import_batch(text: str, default_facility: Optional[str] = None) -> ImportBatchResult:
    return get_pipeline().run(text, default_facility)
