"""Mini README: Tests for environment driven settings and money helpers."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from splitledger.configuration import SplitLedgerSettings
from splitledger.errors import ErrorKind, LedgerValidationError
from splitledger.money import format_minor_units, to_minor_units


def test_settings_read_prefixed_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SPLITLEDGER_LOG_LEVEL", "debug")
    monkeypatch.setenv("SPLITLEDGER_CURRENCY_CODE", "eur")

    settings = SplitLedgerSettings()

    assert settings.log_level == "DEBUG"
    assert settings.currency_code == "EUR"
    assert settings.data_file is None


def test_settings_reject_unknown_log_level(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SPLITLEDGER_LOG_LEVEL", "chatty")

    with pytest.raises(ValidationError):
        SplitLedgerSettings()


@pytest.mark.parametrize(
    ("value", "cents"),
    [("90", 9000), (90, 9000), ("12.345", 1235), (0.1, 10), ("-3.5", -350)],
)
def test_to_minor_units(value, cents: int) -> None:
    assert to_minor_units(value) == cents


def test_to_minor_units_rejects_nan() -> None:
    with pytest.raises(LedgerValidationError) as excinfo:
        to_minor_units("NaN")

    assert excinfo.value.kind is ErrorKind.INVALID_AMOUNT


def test_format_minor_units() -> None:
    assert format_minor_units(3000) == "30.00"
    assert format_minor_units(-1250) == "-12.50"
    assert format_minor_units(7) == "0.07"
