import json
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal
from enum import Enum
from typing import List, Optional
from uuid import UUID

import pytest
from pydantic import BaseModel

from warden_httpapi.data import ExceptionInfo, WardenIteration
from warden_httpapi.serialization.encoder import (
    JsonSerializerOptions,
    camel_case,
    format_datetime,
    format_timedelta,
    from_json,
    to_json,
)


class Severity(Enum):
    LOW = 1
    HIGH_RISK = 2


@dataclass
class Reading:
    sensor_name: str
    taken_at: datetime
    severity: Severity = Severity.LOW
    note: Optional[str] = None
    tags: List[str] = field(default_factory=list)


class Node:
    def __init__(self, name: str) -> None:
        self.name = name
        self.parent: Optional["Node"] = None
        self.children: List["Node"] = []
        self._secret = "hidden"


class Flaky:
    def __init__(self) -> None:
        self.status_code = 200

    @property
    def broken(self) -> str:
        raise RuntimeError("boom")

    @property
    def display_name(self) -> str:
        return "flaky"


class Alert(BaseModel):
    title: str
    severity: Severity = Severity.LOW
    retries: int = 3


class Envelope(BaseModel):
    alert: Alert
    level: Optional[Severity] = None


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("warden_name", "wardenName"),
        ("WardenName", "wardenName"),
        ("HIGH_RISK", "highRisk"),
        ("LOW", "low"),
        ("check", "check"),
    ],
)
def test_camel_case(name: str, expected: str) -> None:
    assert camel_case(name) == expected


def test_format_datetime_uses_unpadded_hour() -> None:
    assert format_datetime(datetime(2024, 1, 2, 3, 4, 5), "yyyy-MM-dd H:mm:ss") == "2024-01-02 3:04:05"
    assert format_datetime(datetime(2024, 1, 2, 13, 4, 5, 678000), "HH:mm:ss.fff") == "13:04:05.678"
    assert format_datetime(date(2024, 12, 31), "yyyy-MM-dd H:mm:ss") == "2024-12-31 0:00:00"


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (timedelta(seconds=1.5), "00:00:01.5000000"),
        (timedelta(days=1, hours=2), "1.02:00:00"),
        (timedelta(minutes=-5), "-00:05:00"),
    ],
)
def test_format_timedelta(value: timedelta, expected: str) -> None:
    assert format_timedelta(value) == expected


def test_dataclass_uses_default_contract() -> None:
    reading = Reading(sensor_name="cpu", taken_at=datetime(2024, 3, 9, 7, 5, 0), severity=Severity.HIGH_RISK)

    payload = json.loads(to_json(reading))

    assert payload == {
        "sensorName": "cpu",
        "takenAt": "2024-03-09 7:05:00",
        "severity": "highRisk",
        "note": None,
        "tags": [],
    }


def test_default_output_is_indented() -> None:
    assert to_json({"a": 1}) == '{\n  "a": 1\n}'


def test_reference_loops_are_ignored() -> None:
    root = Node("root")
    child = Node("child")
    child.parent = root
    root.children.append(child)
    root.parent = root

    payload = json.loads(to_json(root))

    assert payload == {
        "name": "root",
        "children": [{"name": "child", "children": []}],
    }


def test_shared_references_outside_loops_are_kept() -> None:
    shared = {"id": 1}

    payload = json.loads(to_json({"first": shared, "second": shared}))

    assert payload == {"first": {"id": 1}, "second": {"id": 1}}


def test_failing_members_are_skipped() -> None:
    payload = json.loads(to_json(Flaky()))

    assert payload == {"statusCode": 200, "displayName": "flaky"}


def test_failing_members_raise_when_errors_are_not_ignored() -> None:
    with pytest.raises(RuntimeError, match="boom"):
        to_json(Flaky(), JsonSerializerOptions(ignore_errors=False))


def test_reference_loop_raises_when_loops_and_errors_are_not_ignored() -> None:
    node = Node("loop")
    node.parent = node

    with pytest.raises(ValueError, match="Self referencing loop"):
        to_json(node, JsonSerializerOptions(ignore_reference_loops=False, ignore_errors=False))


def test_custom_options() -> None:
    options = JsonSerializerOptions(
        camel_case=False,
        include_nulls=False,
        populate_defaults=False,
        enums_as_strings=False,
        indent=None,
        date_format="yyyy/MM/dd",
    )
    reading = Reading(sensor_name="disk", taken_at=datetime(2024, 3, 9, 7, 5, 0), severity=Severity.HIGH_RISK)

    assert json.loads(to_json(reading, options)) == {
        "sensor_name": "disk",
        "taken_at": "2024/03/09",
        "severity": 2,
    }


def test_scalar_types() -> None:
    payload = json.loads(
        to_json(
            {
                "amount": Decimal("12.5"),
                "id": UUID("12345678-1234-5678-1234-567812345678"),
                "raw": b"hi",
                "items": (1, 2),
            }
        )
    )

    assert payload == {
        "amount": 12.5,
        "id": "12345678-1234-5678-1234-567812345678",
        "raw": "aGk=",
        "items": [1, 2],
    }


def test_pydantic_model_with_exception_info() -> None:
    try:
        try:
            raise KeyError("missing")
        except KeyError as inner:
            raise RuntimeError("watcher failed") from inner
    except RuntimeError as exc:
        info = ExceptionInfo.from_exception(exc)

    payload = json.loads(to_json(info))

    assert payload["message"] == "watcher failed"
    assert payload["source"] == "builtins"
    assert "RuntimeError" in payload["stackTrace"]
    assert payload["innerException"]["message"] == "'missing'"
    assert payload["innerException"]["innerException"] is None


def test_from_json_accepts_enum_names_and_integer_values() -> None:
    by_name = from_json('{"title": "disk", "severity": "highRisk"}', Alert)
    by_value = from_json('{"title": "disk", "severity": 2}', Alert)
    nested = from_json('{"alert": {"title": "cpu", "severity": 1}, "level": "HIGH_RISK"}', Envelope)

    assert by_name.severity is Severity.HIGH_RISK
    assert by_value.severity is Severity.HIGH_RISK
    assert nested.alert.severity is Severity.LOW
    assert nested.level is Severity.HIGH_RISK


def test_from_json_populates_defaults() -> None:
    alert = from_json('{"title": "disk"}', Alert)

    assert alert.severity is Severity.LOW
    assert alert.retries == 3


def test_from_json_without_integer_enum_values() -> None:
    with pytest.raises(ValueError, match="Integer value 2 is not allowed"):
        from_json('{"title": "disk", "severity": 2}', Alert, JsonSerializerOptions(allow_integer_enum_values=False))


def test_decimals_keep_their_exact_digits() -> None:
    amounts = {"amount": Decimal("0.1000000000000000055"), "price": Decimal("12.50")}

    text = to_json(amounts, JsonSerializerOptions(indent=None))

    assert text == '{"amount": 0.1000000000000000055, "price": 12.50}'
    assert json.loads(text, parse_float=Decimal) == {
        "amount": Decimal("0.1000000000000000055"),
        "price": Decimal("12.50"),
    }


def test_iteration_payload_members() -> None:
    started = datetime(2024, 5, 1, 9, 30, 0)
    iteration = WardenIteration(warden_name="Warden", started_at=started, completed_at=started)

    assert set(json.loads(to_json(iteration))) == {
        "wardenName",
        "ordinal",
        "startedAt",
        "completedAt",
        "results",
        "isValid",
        "executionTime",
    }
