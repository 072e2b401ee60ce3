"""Engine subpackage - rate classification and resolution."""
from .rate_resolver import RateResolver, get_resolver, resolve_rate
from .driver_directory import DriverDirectory
from .tariff_table import TariffTable
from .models import FreightRecord, RateQuote, ImportBatchResult

__all__ = [
    'RateResolver', 'get_resolver', 'resolve_rate', 'DriverDirectory',
    'TariffTable', 'FreightRecord', 'RateQuote', 'ImportBatchResult',
]
