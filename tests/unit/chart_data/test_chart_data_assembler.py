"""Tests for chart_data assembly."""

from __future__ import annotations

from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest

from chart_capture.backend import BackendError
from chart_capture.chart_data import (
    ChartDataAssembler,
    build_series,
    format_period_label,
    match_reconciled_values,
    reconciled_value,
)
from tests.helpers.capture_builders import make_aggregate, make_document, make_line_item, make_meter


def _documents():
    return [
        make_document("feb", date(2024, 2, 29), [make_line_item(1300.0)]),
        make_document("jan", date(2024, 1, 31), [make_line_item(1200.0)]),
    ]


class TestFormatPeriodLabel:
    def test_short_month_and_year(self) -> None:
        assert format_period_label(date(2024, 3, 31)) == "Mar 2024"


class TestMatchReconciledValues:
    """Tests for match_reconciled_values."""

    def test_matches_on_year_and_month(self) -> None:
        aggregates = [make_aggregate(date(2024, 1, 31), total_cost=1150.0)]

        assert match_reconciled_values(_documents(), aggregates, "total") == {"jan": 1150.0}

    def test_later_run_wins(self) -> None:
        aggregates = [
            make_aggregate(date(2024, 1, 31), total_cost=1100.0),
            make_aggregate(date(2024, 1, 30), total_cost=1150.0),
        ]

        assert match_reconciled_values(_documents(), aggregates, "total") == {"jan": 1150.0}

    def test_same_month_different_year_does_not_match(self) -> None:
        aggregates = [make_aggregate(date(2023, 1, 31), total_cost=999.0)]

        assert match_reconciled_values(_documents(), aggregates, "total") == {}


class TestReconciledValue:
    @pytest.mark.parametrize(
        "metric_key, expected",
        [
            ("total", 1.0),
            ("basic", 2.0),
            ("kva-charge", 3.0),
            ("kwh-charge", 4.0),
            ("kwh-consumption", 5.0),
            ("water", None),
        ],
    )
    def test_field_mapping(self, metric_key, expected) -> None:
        aggregate = make_aggregate(
            date(2024, 1, 31),
            total_cost=1.0,
            fixed_charges=2.0,
            demand_charges=3.0,
            energy_cost=4.0,
            total_kwh=5.0,
        )

        assert reconciled_value(aggregate, metric_key) == expected

    def test_max_demand_prefers_s_column(self) -> None:
        aggregate = make_aggregate(date(2024, 1, 31), column_max_values={"kVA": 80.0, "S": 75.0})

        assert reconciled_value(aggregate, "kva-consumption") == 75.0

    def test_max_demand_falls_back_to_kva_column(self) -> None:
        aggregate = make_aggregate(date(2024, 1, 31), column_max_values={"kVA": 80.0})

        assert reconciled_value(aggregate, "kva-consumption") == 80.0


class TestBuildSeries:
    """Tests for build_series."""

    def test_sorted_by_period_end_with_reconciliation_gaps(self) -> None:
        aggregates = [make_aggregate(date(2024, 2, 29), total_cost=1280.0)]

        series = build_series(_documents(), aggregates, "total")

        assert [point.period_label for point in series] == ["Jan 2024", "Feb 2024"]
        assert [point.document_amount for point in series] == [1200.0, 1300.0]
        assert [point.reconciled_amount for point in series] == [None, 1280.0]

    def test_empty_when_no_document_has_a_value(self) -> None:
        assert build_series(_documents(), [], "kva-charge") == []

    def test_empty_without_documents(self) -> None:
        assert build_series([], [make_aggregate(date(2024, 1, 31), total_cost=1.0)], "total") == []


class TestChartDataAssembler:
    @pytest.mark.asyncio
    async def test_fetches_aggregates_for_meter(self) -> None:
        source = MagicMock()
        source.get_reconciliation_aggregates = AsyncMock(
            return_value=[make_aggregate(date(2024, 1, 31), total_cost=1150.0)]
        )
        assembler = ChartDataAssembler(source)

        series = await assembler.assemble(make_meter("m1"), _documents(), "total")

        source.get_reconciliation_aggregates.assert_awaited_once_with("m1")
        assert series[0].reconciled_amount == 1150.0

    @pytest.mark.asyncio
    async def test_backend_error_charts_documents_only(self) -> None:
        source = MagicMock()
        source.get_reconciliation_aggregates = AsyncMock(side_effect=BackendError("timeout"))
        assembler = ChartDataAssembler(source)

        series = await assembler.assemble(make_meter("m1"), _documents(), "total")

        assert len(series) == 2
        assert all(point.reconciled_amount is None for point in series)
