"""Tests for rate chart exception hierarchy."""

import pytest

from ratechart.exceptions import (ChartNotFoundError, ConfigError,
                                  DataSourceError, DataValidationError,
                                  InputError, RateChartError)


def test_rate_chart_error_is_base_exception() -> None:
    """RateChartError should be catchable as Exception."""
    with pytest.raises(Exception):
        raise RateChartError("test error")


@pytest.mark.parametrize(
    "error_cls",
    [ConfigError, DataSourceError, DataValidationError, InputError, ChartNotFoundError],
)
def test_errors_inherit_from_rate_chart_error(error_cls: type[RateChartError]) -> None:
    """Every package error should be catchable as RateChartError."""
    with pytest.raises(RateChartError):
        raise error_cls("failure")


def test_data_validation_error_is_not_pydantic_error() -> None:
    """DataValidationError should not be confused with pydantic's ValidationError."""
    from pydantic import ValidationError

    assert not issubclass(DataValidationError, ValidationError)


def test_exception_messages_preserved() -> None:
    """Exception messages should be accessible via str()."""
    msg = "detailed error message"
    err = ChartNotFoundError(msg)
    assert str(err) == msg
