import logging
from datetime import date, datetime, timezone
from unittest.mock import MagicMock

from app.services.quote_delivery import calculate_delivery_with_holidays, get_setting_value


START = datetime(2025, 1, 6, 9, 0, tzinfo=timezone.utc)


def test_without_location_uses_weekend_only_walk():
    holidays = MagicMock()
    estimate = calculate_delivery_with_holidays(holidays, None, 5, START)
    assert estimate.estimated_delivery_date == date(2025, 1, 13)
    assert estimate.business_days_required == 5
    assert estimate.skipped_holidays == 0
    holidays.list_holidays.assert_not_called()


def test_location_holidays_are_skipped():
    holidays = MagicMock()
    holidays.list_holidays.return_value = [{"holiday_date": "2025-01-08"}]
    estimate = calculate_delivery_with_holidays(holidays, "toronto", 5, START)
    holidays.list_holidays.assert_called_once_with("toronto", date(2025, 1, 6))
    assert estimate.estimated_delivery_date == date(2025, 1, 14)
    assert estimate.skipped_holidays == 1


def test_holiday_rows_as_objects_with_dates():
    row = MagicMock(holiday_date=date(2025, 1, 9))
    holidays = MagicMock()
    holidays.list_holidays.return_value = [row]
    estimate = calculate_delivery_with_holidays(holidays, "toronto", 3, START)
    assert estimate.estimated_delivery_date == date(2025, 1, 10)
    assert estimate.skipped_holidays == 1


def test_holiday_lookup_failure_falls_back(caplog):
    holidays = MagicMock()
    holidays.list_holidays.side_effect = RuntimeError("db down")
    caplog.set_level(logging.WARNING, logger="app.services.quote_delivery")
    estimate = calculate_delivery_with_holidays(holidays, "toronto", 5, START)
    assert estimate.estimated_delivery_date == date(2025, 1, 13)
    assert estimate.skipped_holidays == 0
    assert any("Holiday lookup failed" in r.getMessage() for r in caplog.records)


def test_get_setting_value_returns_stored_value():
    reader = MagicMock()
    reader.get.return_value = "2-4 business days"
    assert get_setting_value(reader, "default_turnaround_time", "x") == "2-4 business days"


def test_get_setting_value_blank_or_missing_uses_default():
    reader = MagicMock()
    reader.get.return_value = None
    assert get_setting_value(reader, "quote_expiry_days", 30) == 30
    reader.get.return_value = "   "
    assert get_setting_value(reader, "quote_expiry_days", 30) == 30


def test_get_setting_value_error_uses_default(caplog):
    reader = MagicMock()
    reader.get.side_effect = RuntimeError("boom")
    caplog.set_level(logging.WARNING, logger="app.services.quote_delivery")
    assert get_setting_value(reader, "quote_expiry_days", 30) == 30
    assert any("quote_expiry_days" in r.getMessage() for r in caplog.records)
