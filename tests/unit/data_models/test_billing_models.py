"""Tests for data_models.billing module."""

from datetime import date

import pytest

from chart_capture.data_models import LineItem, Meter, ReconciliationAggregate, parse_iso_date


class TestParseIsoDate:
    def test_accepts_timestamp_suffix(self) -> None:
        assert parse_iso_date("2024-03-31T00:00:00+00:00") == date(2024, 3, 31)

    def test_passes_dates_through(self) -> None:
        assert parse_iso_date(date(2024, 1, 1)) == date(2024, 1, 1)

    @pytest.mark.parametrize("value", [None, "", "2024-3", 20240301])
    def test_rejects_malformed(self, value) -> None:
        with pytest.raises(ValueError):
            parse_iso_date(value)


class TestFromRow:
    """Row constructors normalise backend payloads."""

    def test_meter_from_row(self) -> None:
        meter = Meter.from_row({"id": 7, "meter_number": "DB-01", "name": "Main"})

        assert meter.id == "7"
        assert meter.meter_number == "DB-01"
        assert meter.name == "Main"
        assert meter.tariff is None

    def test_line_item_coerces_numbers(self) -> None:
        item = LineItem.from_row(
            {"amount": "125.50", "unit": "kWh", "supply": "Normal", "consumption": 300, "description": None}
        )

        assert item.amount == 125.5
        assert item.consumption == 300.0
        assert item.description == ""
        assert item.previous_reading is None

    def test_aggregate_reads_run_dates(self) -> None:
        aggregate = ReconciliationAggregate.from_row(
            {
                "total_cost": 1000,
                "total_kwh": "420",
                "column_max_values": {"S": 55.5, "P1": None},
                "reconciliation_runs": {"date_from": "2024-02-01", "date_to": "2024-02-29"},
            }
        )

        assert aggregate.date_to == date(2024, 2, 29)
        assert aggregate.total_cost == 1000.0
        assert aggregate.total_kwh == 420.0
        assert aggregate.column_max_values == {"S": 55.5}

    def test_aggregate_requires_run(self) -> None:
        with pytest.raises(ValueError):
            ReconciliationAggregate.from_row({"total_cost": 10})
