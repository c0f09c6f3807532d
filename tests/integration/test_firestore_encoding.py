"""Firestore REST value encoding."""

from datetime import UTC, datetime

import pytest

from app.infrastructure.firebase._rest_encoding import (
    _encode_value,
    decode_document,
    encode_document,
)


def test_scalars_use_firestore_value_types() -> None:
    assert _encode_value(None) == {"nullValue": None}
    assert _encode_value(True) == {"booleanValue": True}
    assert _encode_value(3) == {"integerValue": "3"}
    assert _encode_value(2.5) == {"doubleValue": 2.5}
    assert _encode_value("Bếp") == {"stringValue": "Bếp"}
    assert _encode_value(b"\x00\x01") == {"bytesValue": "AAE="}


def test_naive_datetime_is_treated_as_utc() -> None:
    encoded = _encode_value(datetime(2024, 1, 10, 10, 0))
    assert encoded == {"timestampValue": "2024-01-10T10:00:00.000000Z"}


def test_sets_are_encoded_sorted() -> None:
    encoded = _encode_value({"view_tasks", "admin"})
    assert encoded == {
        "arrayValue": {"values": [{"stringValue": "admin"}, {"stringValue": "view_tasks"}]}
    }


def test_unsupported_type_raises() -> None:
    with pytest.raises(TypeError):
        _encode_value(object())


def test_nested_document_decodes_back() -> None:
    data = {
        "title": "Close the kitchen",
        "progress": 50,
        "isSequential": True,
        "assignees": [{"userId": "u1", "timeAllocation": 2.0, "notes": None}],
        "recurringConfig": None,
    }
    assert decode_document(encode_document(data)["fields"]) == data


def test_nanosecond_timestamps_are_truncated_to_microseconds() -> None:
    decoded = decode_document({"createdAt": {"timestampValue": "2024-01-10T10:00:00.123456789Z"}})
    assert decoded["createdAt"] == datetime(2024, 1, 10, 10, 0, 0, 123456, tzinfo=UTC)


def test_empty_fields_decode_to_empty_dict() -> None:
    assert decode_document(None) == {}
    assert decode_document({"tags": {"arrayValue": {}}}) == {"tags": []}
