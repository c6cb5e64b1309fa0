"""Tests for metric_extractor and metric_catalog modules."""

from datetime import date

import pytest

from chart_capture.metric_catalog import CHART_METRICS, get_metric
from chart_capture.metric_extractor import extract_meter_readings, extract_metric_value
from tests.helpers.capture_builders import make_document, make_line_item


def _document(*items, total_amount=None):
    return make_document("d1", date(2024, 1, 31), items, total_amount=total_amount)


class TestExtractMetricValue:
    """Tests for extract_metric_value."""

    def test_total_excludes_emergency_supply(self) -> None:
        document = _document(make_line_item(10.0, supply="Normal"), make_line_item(5.0, supply="Emergency"))

        assert extract_metric_value(document, "total") == 10

    def test_total_counts_items_without_supply(self) -> None:
        document = _document(make_line_item(10.0), make_line_item(2.5, unit="Monthly", supply=None))

        assert extract_metric_value(document, "total") == 12.5

    def test_total_is_absent_without_qualifying_items(self) -> None:
        document = _document(make_line_item(5.0, supply="Emergency"))

        assert extract_metric_value(document, "total") is None

    def test_basic_uses_monthly_item(self) -> None:
        document = _document(make_line_item(900.0), make_line_item(250.0, unit="Monthly", supply=None))

        assert extract_metric_value(document, "basic") == 250.0

    def test_charge_metrics_pick_first_matching_item(self) -> None:
        document = _document(
            make_line_item(50.0, unit="kWh", supply="Emergency", consumption=10),
            make_line_item(700.0, unit="kWh", supply="Normal", consumption=1400),
            make_line_item(300.0, unit="kVA", supply=None, consumption=65),
        )

        assert extract_metric_value(document, "kwh-charge") == 700.0
        assert extract_metric_value(document, "kwh-consumption") == 1400
        assert extract_metric_value(document, "kva-charge") == 300.0
        assert extract_metric_value(document, "kva-consumption") == 65

    def test_zero_amount_is_kept(self) -> None:
        document = _document(make_line_item(0.0, unit="Monthly", supply=None))

        assert extract_metric_value(document, "basic") == 0.0

    def test_missing_item_is_absent(self) -> None:
        document = _document(make_line_item(700.0))

        assert extract_metric_value(document, "kva-charge") is None
        assert extract_metric_value(document, "basic") is None

    def test_unknown_metric_falls_back_to_document_total(self) -> None:
        document = _document(make_line_item(700.0), total_amount=812.0)

        assert extract_metric_value(document, "water") == 812.0


class TestExtractMeterReadings:
    def test_kva_metrics_use_kva_item(self) -> None:
        document = _document(
            make_line_item(700.0, previous_reading=100, current_reading=200),
            make_line_item(300.0, unit="kVA", supply=None, previous_reading=1, current_reading=2),
        )

        readings = extract_meter_readings(document, "kva-charge")

        assert (readings.previous, readings.current) == (1, 2)

    def test_other_metrics_use_normal_kwh_item(self) -> None:
        document = _document(make_line_item(700.0, previous_reading=100, current_reading=200))

        assert extract_meter_readings(document, "total").current == 200

    def test_no_matching_item(self) -> None:
        readings = extract_meter_readings(_document(), "kwh-consumption")

        assert readings.previous is None
        assert readings.current is None


class TestMetricCatalog:
    def test_catalog_order_and_filenames(self) -> None:
        assert [metric.key for metric in CHART_METRICS] == [
            "total",
            "basic",
            "kva-charge",
            "kwh-charge",
            "kva-consumption",
            "kwh-consumption",
        ]
        assert all(metric.filename == metric.key for metric in CHART_METRICS)

    def test_consumption_flag(self) -> None:
        assert get_metric("kwh-consumption").is_consumption
        assert not get_metric("basic").is_consumption

    def test_unknown_metric(self) -> None:
        with pytest.raises(KeyError):
            get_metric("water")
