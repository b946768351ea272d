import pytest

from coinbot.errors import (
    ApiError,
    AppError,
    DatabaseError,
    EnvVarError,
    InvalidDataError,
)


@pytest.mark.parametrize(
    ("error_class", "prefix"),
    [
        (DatabaseError, "Database error: "),
        (ApiError, "API request failed: "),
        (EnvVarError, "Environment variable missing: "),
        (InvalidDataError, "Invalid data: "),
    ],
)
def test_message_carries_prefix_and_detail(error_class, prefix):
    error = error_class("details here")
    assert str(error) == prefix + "details here"
    assert error.detail == "details here"


@pytest.mark.parametrize(
    "error_class", [DatabaseError, ApiError, EnvVarError, InvalidDataError]
)
def test_all_errors_are_app_errors(error_class):
    error = error_class("boom")
    assert isinstance(error, AppError)
    assert error.detail == "boom"
    assert str(error).endswith(": boom")


def test_wrapped_exception_becomes_detail():
    cause = ValueError("could not convert")
    error = InvalidDataError(cause)
    assert str(error) == "Invalid data: could not convert"
    assert error.detail is cause


def test_wrapped_runtime_error_message():
    cause = RuntimeError("connection refused")
    error = DatabaseError(cause)
    assert error.detail is cause
    assert str(error) == "Database error: connection refused"