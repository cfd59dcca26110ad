# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

import pytest

from confstore.core.exceptions import (
    AccessDeniedError,
    ConfStoreError,
    ErrorHandler,
    InvalidArgumentError,
    LocationNotFoundError,
    SectionNotFoundError,
    StoreIOError,
)


def test_builtin_compatibility():
    """Store errors can be caught as the matching builtin"""
    assert isinstance(LocationNotFoundError("x"), FileNotFoundError)
    assert isinstance(SectionNotFoundError("x"), KeyError)
    assert isinstance(InvalidArgumentError("x"), ValueError)
    assert isinstance(AccessDeniedError("x"), PermissionError)
    assert isinstance(StoreIOError("x"), OSError)


def test_str_includes_details_and_cause():
    cause = OSError(28, "No space left on device")
    error = StoreIOError(
        "Failed to write [Net] Host",
        operation="write_value",
        location="/tmp/a.ini",
        details={"written": 2},
        cause=cause,
    )

    text = str(error)
    assert text.startswith("Failed to write [Net] Host")
    assert "written" in text
    assert "No space left" in text


def test_section_not_found_str_is_plain():
    assert str(SectionNotFoundError("Net is not found.")) == "Net is not found."


def test_to_dict():
    error = StoreIOError(
        "boom", operation="read_section", location="a.ini", cause=ValueError("bad")
    )

    data = error.to_dict()

    assert data["type"] == "StoreIOError"
    assert data["operation"] == "read_section"
    assert data["location"] == "a.ini"
    assert data["cause"] == {"type": "ValueError", "message": "bad"}


def test_error_handler_wraps_foreign_errors():
    result = ErrorHandler.handle_exception(RuntimeError("oops"), {"op": "x"}, reraise=False)

    assert result["type"] == "ConfStoreError"
    assert result["context"] == {"op": "x"}

    with pytest.raises(ConfStoreError):
        ErrorHandler.handle_exception(RuntimeError("oops"))
