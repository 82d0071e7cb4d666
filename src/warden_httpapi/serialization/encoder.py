"""패널 전송용 JSON 직렬화."""

from __future__ import annotations

import base64
import dataclasses
import json
import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Tuple, Type, TypeVar, Union, get_args, get_origin
from uuid import UUID, uuid4

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from ..logging import get_logger

log = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

_SKIP = object()
_NO_DEFAULT = object()
_DATE_TOKENS = re.compile(r"yyyy|MM|dd|HH|H|mm|ss|fff")

Member = Tuple[str, Callable[[], Any], Any]


@dataclass(frozen=True, slots=True)
class JsonSerializerOptions:
    """직렬화 옵션.

    ``date_format`` 은 ``yyyy``, ``MM``, ``dd``, ``HH``, ``H``, ``mm``, ``ss``, ``fff`` 토큰을 사용한다.
    """

    camel_case: bool = True
    date_format: str = "yyyy-MM-dd H:mm:ss"
    ignore_reference_loops: bool = True
    include_nulls: bool = True
    populate_defaults: bool = True
    enums_as_strings: bool = True
    allow_integer_enum_values: bool = True
    ignore_errors: bool = True
    indent: Optional[int] = 2


DEFAULT_SERIALIZER_OPTIONS = JsonSerializerOptions()


def camel_case(name: str) -> str:
    """``warden_name`` / ``WardenName`` / ``WARNING`` 형태의 이름을 lowerCamelCase 로 바꾼다."""

    stripped = name.strip("_")
    if "_" in stripped or stripped.isupper():
        return to_camel(stripped.lower())
    return stripped[:1].lower() + stripped[1:]


def format_datetime(value: Union[date, datetime], pattern: str) -> str:
    def replace(match: "re.Match[str]") -> str:
        token = match.group(0)
        if token == "yyyy":
            return f"{value.year:04d}"
        if token == "MM":
            return f"{value.month:02d}"
        if token == "dd":
            return f"{value.day:02d}"
        hour = getattr(value, "hour", 0)
        if token == "HH":
            return f"{hour:02d}"
        if token == "H":
            return str(hour)
        if token == "mm":
            return f"{getattr(value, 'minute', 0):02d}"
        if token == "ss":
            return f"{getattr(value, 'second', 0):02d}"
        return f"{getattr(value, 'microsecond', 0) // 1000:03d}"

    return _DATE_TOKENS.sub(replace, pattern)


def format_timedelta(value: timedelta) -> str:
    """``[-][d.]hh:mm:ss[.fffffff]`` 형식으로 변환한다."""

    total = (value.days * 86400 + value.seconds) * 1_000_000 + value.microseconds
    sign = "-" if total < 0 else ""
    seconds, micro = divmod(abs(total), 1_000_000)
    minutes, second = divmod(seconds, 60)
    hours, minute = divmod(minutes, 60)
    days, hour = divmod(hours, 24)
    text = f"{hour:02d}:{minute:02d}:{second:02d}"
    if days:
        text = f"{days}.{text}"
    if micro:
        text = f"{text}.{micro * 10:07d}"
    return f"{sign}{text}"


class _JsonEncoder:
    """객체 그래프를 ``json.dumps`` 로 기록할 수 있는 값으로 변환한다."""

    def __init__(self, options: JsonSerializerOptions) -> None:
        self._options = options
        self._path: set[int] = set()
        self._decimal_prefix = f"decimal:{uuid4().hex}:"
        self.decimals: Dict[str, str] = {}

    def encode(self, value: Any) -> Any:
        if isinstance(value, Enum):
            return self._encode_enum(value)
        if value is None or isinstance(value, (str, bool, int, float)):
            return value
        if isinstance(value, (datetime, date)):
            return format_datetime(value, self._options.date_format)
        if isinstance(value, time):
            return value.isoformat()
        if isinstance(value, timedelta):
            return format_timedelta(value)
        if isinstance(value, Decimal):
            return self._encode_decimal(value)
        if isinstance(value, UUID):
            return str(value)
        if isinstance(value, (bytes, bytearray)):
            return base64.b64encode(value).decode()

        marker = id(value)
        if marker in self._path:
            if self._options.ignore_reference_loops:
                return _SKIP
            raise ValueError(f"Self referencing loop detected for type '{type(value).__name__}'.")
        self._path.add(marker)
        try:
            return self._encode_container(value)
        finally:
            self._path.discard(marker)

    def _encode_container(self, value: Any) -> Any:
        if isinstance(value, BaseModel):
            return self._encode_members(self._model_members(value))
        if dataclasses.is_dataclass(value) and not isinstance(value, type):
            return self._encode_members(self._dataclass_members(value))
        if isinstance(value, Mapping):
            return self._encode_members(
                (str(key), (lambda item=item: item), _NO_DEFAULT) for key, item in value.items()
            )
        if isinstance(value, (list, tuple, set, frozenset)):
            return self._encode_items(value)
        if hasattr(value, "__dict__"):
            return self._encode_members(self._object_members(value))
        return str(value)

    def _encode_decimal(self, value: Decimal) -> Any:
        if not value.is_finite():
            return float(value)
        placeholder = f"{self._decimal_prefix}{len(self.decimals)}"
        self.decimals[placeholder] = str(value)
        return placeholder

    def _encode_enum(self, value: Enum) -> Any:
        if self._options.enums_as_strings:
            return camel_case(value.name)
        return value.value

    def _encode_items(self, items: Iterable[Any]) -> list[Any]:
        result = []
        for item in items:
            try:
                encoded = self.encode(item)
            except Exception as exc:
                if not self._options.ignore_errors:
                    raise
                log.debug("json_item_skipped", error=str(exc), error_type=type(exc).__name__)
                continue
            if encoded is not _SKIP:
                result.append(encoded)
        return result

    def _encode_members(self, members: Iterable[Member]) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        for name, getter, default in members:
            try:
                raw = getter()
                if not self._options.populate_defaults and default is not _NO_DEFAULT and raw == default:
                    continue
                encoded = self.encode(raw)
            except Exception as exc:
                if not self._options.ignore_errors:
                    raise
                log.debug("json_member_skipped", member=name, error=str(exc), error_type=type(exc).__name__)
                continue
            if encoded is _SKIP:
                continue
            if encoded is None and not self._options.include_nulls:
                continue
            result[self._member_name(name)] = encoded
        return result

    def _member_name(self, name: str) -> str:
        return camel_case(name) if self._options.camel_case else name

    @staticmethod
    def _getter(obj: Any, name: str) -> Callable[[], Any]:
        return lambda: getattr(obj, name)

    def _model_members(self, value: BaseModel) -> Iterable[Member]:
        model_type = type(value)
        for name, field in model_type.model_fields.items():
            default = _NO_DEFAULT if field.is_required() else field.get_default(call_default_factory=True)
            yield name, self._getter(value, name), default
        for name in model_type.model_computed_fields:
            yield name, self._getter(value, name), _NO_DEFAULT

    def _dataclass_members(self, value: Any) -> Iterable[Member]:
        for field in dataclasses.fields(value):
            if field.default is not dataclasses.MISSING:
                default = field.default
            elif field.default_factory is not dataclasses.MISSING:
                default = field.default_factory()
            else:
                default = _NO_DEFAULT
            yield field.name, self._getter(value, field.name), default

    def _object_members(self, value: Any) -> Iterable[Member]:
        seen = set()
        for name in vars(value):
            if not name.startswith("_"):
                seen.add(name)
                yield name, self._getter(value, name), _NO_DEFAULT
        for klass in type(value).__mro__:
            for name, attribute in vars(klass).items():
                if isinstance(attribute, property) and not name.startswith("_") and name not in seen:
                    seen.add(name)
                    yield name, self._getter(value, name), _NO_DEFAULT


def to_json(data: Any, options: Optional[JsonSerializerOptions] = None) -> str:
    """객체를 JSON 문자열로 직렬화한다.

    기본 옵션에서는 순환 참조와 개별 필드 오류를 건너뛰므로 예외가 발생하지 않는다.
    ``Decimal`` 은 float 를 거치지 않고 원래 자릿수 그대로 숫자로 기록한다.
    """

    options = options or DEFAULT_SERIALIZER_OPTIONS
    encoder = _JsonEncoder(options)
    text = json.dumps(encoder.encode(data), indent=options.indent, ensure_ascii=False)
    for placeholder, literal in encoder.decimals.items():
        text = text.replace(json.dumps(placeholder), literal)
    return text


def _enum_type(annotation: Any) -> Optional[Type[Enum]]:
    if isinstance(annotation, type) and issubclass(annotation, Enum):
        return annotation
    if get_origin(annotation) is not None:
        for argument in get_args(annotation):
            enum_type = _enum_type(argument)
            if enum_type is not None:
                return enum_type
    return None


def _model_type(annotation: Any) -> Optional[Type[BaseModel]]:
    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        return annotation
    if get_origin(annotation) is not None:
        for argument in get_args(annotation):
            model_type = _model_type(argument)
            if model_type is not None:
                return model_type
    return None


def _resolve_enum(enum_type: Type[Enum], raw: Any, options: JsonSerializerOptions) -> Any:
    if isinstance(raw, int) and not isinstance(raw, bool):
        if not options.allow_integer_enum_values:
            raise ValueError(f"Integer value {raw} is not allowed for enum '{enum_type.__name__}'.")
        for member in enum_type:
            if member.value == raw:
                return member
    if isinstance(raw, str):
        for member in enum_type:
            if raw in (member.name, camel_case(member.name)):
                return member
    return raw


def _resolve_enums(payload: Any, model: Type[BaseModel], options: JsonSerializerOptions) -> Any:
    if not isinstance(payload, dict):
        return payload
    resolved = dict(payload)
    for name, field in model.model_fields.items():
        key = next((candidate for candidate in (field.alias, name) if candidate and candidate in resolved), None)
        if key is None:
            continue
        enum_type = _enum_type(field.annotation)
        if enum_type is not None:
            resolved[key] = _resolve_enum(enum_type, resolved[key], options)
            continue
        nested = _model_type(field.annotation)
        if nested is not None:
            resolved[key] = _resolve_enums(resolved[key], nested, options)
    return resolved


def from_json(text: str, model: Type[ModelT], options: Optional[JsonSerializerOptions] = None) -> ModelT:
    """JSON 문자열을 pydantic 모델로 변환한다.

    열거형은 camelCase 이름 또는 (허용된 경우) 정수 순번으로 받을 수 있고, 누락된 필드는 모델 기본값으로 채운다.
    """

    options = options or DEFAULT_SERIALIZER_OPTIONS
    payload = json.loads(text)
    return model.model_validate(_resolve_enums(payload, model, options))


__all__ = [
    "DEFAULT_SERIALIZER_OPTIONS",
    "JsonSerializerOptions",
    "camel_case",
    "format_datetime",
    "format_timedelta",
    "from_json",
    "to_json",
]
