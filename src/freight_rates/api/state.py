"""Shared engine instances for the API process."""
from ..config.settings import get_settings
from ..engine.driver_directory import DriverDirectory
from ..engine.rate_resolver import get_resolver
from ..ingest.import_pipeline import ImportPipeline

settings = get_settings()
resolver = get_resolver()
directory = DriverDirectory.from_csv(settings.drivers_csv)
pipeline = ImportPipeline(settings=settings, directory=directory, resolver=resolver)
