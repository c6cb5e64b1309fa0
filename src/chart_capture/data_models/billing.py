"""
Billing-side records consumed by the chart capture engine.

Documents and reconciliation aggregates arrive from the hosted backend as JSON
rows; the ``from_row`` constructors normalise them into these immutable
dataclasses so the rest of the engine never touches raw payloads.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Mapping, Optional, Tuple

UNIT_KWH = "kWh"
UNIT_KVA = "kVA"
UNIT_MONTHLY = "Monthly"

SUPPLY_NORMAL = "Normal"
SUPPLY_EMERGENCY = "Emergency"


def parse_iso_date(value: Any) -> date:
    """Parse ``YYYY-MM-DD`` (optionally followed by a time part) into a date."""
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or len(value) < 10:
        raise ValueError(f"Expected ISO date string, got {value!r}")
    return date.fromisoformat(value[:10])


def _optional_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


@dataclass(frozen=True)
class Meter:
    """A measurement point; immutable for the duration of a capture run."""

    id: str
    meter_number: str
    name: Optional[str] = None
    meter_type: Optional[str] = None
    tariff: Optional[str] = None
    rating: Optional[str] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Meter":
        return cls(
            id=str(row["id"]),
            meter_number=str(row["meter_number"]),
            name=row.get("name"),
            meter_type=row.get("meter_type"),
            tariff=row.get("tariff"),
            rating=row.get("rating"),
        )


@dataclass(frozen=True)
class LineItem:
    """One charge line extracted from a tenant bill."""

    amount: Optional[float]
    description: str = ""
    meter_number: Optional[str] = None
    unit: Optional[str] = None  # kWh, kVA or Monthly
    supply: Optional[str] = None  # Normal or Emergency
    previous_reading: Optional[float] = None
    current_reading: Optional[float] = None
    consumption: Optional[float] = None
    rate: Optional[float] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "LineItem":
        return cls(
            amount=_optional_float(row.get("amount")),
            description=str(row.get("description") or ""),
            meter_number=row.get("meter_number"),
            unit=row.get("unit"),
            supply=row.get("supply"),
            previous_reading=_optional_float(row.get("previous_reading")),
            current_reading=_optional_float(row.get("current_reading")),
            consumption=_optional_float(row.get("consumption")),
            rate=_optional_float(row.get("rate")),
        )


@dataclass(frozen=True)
class BillingDocument:
    """A billing period extracted from a tenant bill."""

    document_id: str
    period_start: date
    period_end: date
    total_amount: Optional[float]
    line_items: Tuple[LineItem, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ReconciliationAggregate:
    """Per-meter totals of one reconciliation run, tagged with the run's date range."""

    date_from: date
    date_to: date
    total_cost: Optional[float] = None
    energy_cost: Optional[float] = None
    fixed_charges: Optional[float] = None
    demand_charges: Optional[float] = None
    total_kwh: Optional[float] = None
    column_max_values: Mapping[str, float] = field(default_factory=dict)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "ReconciliationAggregate":
        run = row.get("reconciliation_runs")
        if not isinstance(run, Mapping):
            raise ValueError("Reconciliation result row is missing its run date range")
        max_values = row.get("column_max_values") or {}
        if not isinstance(max_values, Mapping):
            raise ValueError(f"column_max_values must be an object, got {type(max_values).__name__}")
        return cls(
            date_from=parse_iso_date(run["date_from"]),
            date_to=parse_iso_date(run["date_to"]),
            total_cost=_optional_float(row.get("total_cost")),
            energy_cost=_optional_float(row.get("energy_cost")),
            fixed_charges=_optional_float(row.get("fixed_charges")),
            demand_charges=_optional_float(row.get("demand_charges")),
            total_kwh=_optional_float(row.get("total_kwh")),
            column_max_values={str(key): float(value) for key, value in max_values.items() if value is not None},
        )
