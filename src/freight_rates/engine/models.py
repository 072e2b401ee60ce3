"""
Data models for the freight rate engine.

Uses dataclasses for structured, type-safe data representation.
"""
from dataclasses import dataclass, field, asdict
from typing import Optional


# Facilities (CDD)
SANTA_LUZIA = 'Santa Luzia'
CONTAGEM = 'Contagem'
FACILITIES = (SANTA_LUZIA, CONTAGEM)

# Vehicle classes
VUC = 'VUC'
TOCO = 'TOCO'
TRUCK = 'TRUCK'
OTHER = 'OTHER'
VEHICLE_CLASSES = (VUC, TOCO, TRUCK, OTHER)

# Row failure reasons
TOO_FEW_COLUMNS = 'too_few_columns'
MISSING_PLATE = 'missing_plate'
MISSING_COUNT = 'missing_count'
INVALID_COUNT = 'invalid_count'


@dataclass(frozen=True)
class TraceStep:
    """A single step in the rate resolution trace."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass(frozen=True)
class TariffRule:
    """
    Negotiated breakpoint for one (facility, zone, vehicle class).

    Counts up to ``threshold`` pay ``price_low``. When ``band_threshold`` is
    set, counts above ``threshold`` and up to ``band_threshold`` pay
    ``band_price``. Everything above pays ``price_high``.
    """
    facility: str
    special: bool
    vehicle_class: str
    threshold: int
    price_low: float
    price_high: float
    band_threshold: Optional[int] = None
    band_price: Optional[float] = None

    @property
    def key(self) -> tuple[str, bool, str]:
        return (self.facility, self.special, self.vehicle_class)

    def price_for(self, count: int) -> float:
        """Apply the breakpoint to a delivery count."""
        if count <= self.threshold:
            return self.price_low
        if self.band_threshold is not None and count <= self.band_threshold:
            return self.band_price
        return self.price_high

    def describe(self) -> str:
        zone = 'special' if self.special else 'standard'
        text = (
            f"{self.facility}/{zone}/{self.vehicle_class}: "
            f"<= {self.threshold} -> {self.price_low:g}"
        )
        if self.band_threshold is not None:
            text += f", <= {self.band_threshold} -> {self.band_price:g}"
        return text + f", above -> {self.price_high:g}"


@dataclass(frozen=True)
class DriverEntry:
    """A known driver on the fixed plate roster."""
    plate: str
    name: str
    vehicle_class: str
    facility: str


@dataclass
class RateQuote:
    """Result of resolving one delivery run against the tariff table."""
    facility: str
    vehicle_class: str
    special: bool
    count: int
    price: float
    rule: Optional[TariffRule] = None
    trace: list[TraceStep] = field(default_factory=list)

    def add_trace(self, step: str, description: str, value: str = None):
        """Add a step to the trace for this quote."""
        self.trace.append(TraceStep(step=step, description=description, value=value))

    def get_trace_text(self) -> str:
        """Get human-readable trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"→ {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"→ {t.step}: {t.description}")
        return "\n".join(lines)


@dataclass
class FreightRecord:
    """A priced delivery run, ready for the caller to id and persist."""
    driver_name: str
    license_plate: str
    vehicle_class: str
    map_ref: str
    city: str
    region: str
    date: str
    facility: str
    delivery_count: int
    price: float
    created_at: Optional[float] = None

    @property
    def route(self) -> str:
        """Display label joining map, city and region."""
        return " - ".join(p for p in (self.map_ref, self.city, self.region) if p)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class RowFailure:
    """An import line that could not be turned into a record."""
    line_number: int
    reason: str
    raw: str = ''


@dataclass
class ImportBatchResult:
    """Records and counters for one import call."""
    records: list[FreightRecord] = field(default_factory=list)
    failures: list[RowFailure] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return len(self.records)

    @property
    def failure_count(self) -> int:
        return len(self.failures)

    @property
    def is_total_failure(self) -> bool:
        """True when the batch produced no records at all."""
        return not self.records

    def summary(self) -> dict:
        return {"imported": self.success_count, "skipped": self.failure_count}
