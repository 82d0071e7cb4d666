"""대소문자를 구분하지 않는 HTTP 헤더 매핑."""

from __future__ import annotations

from typing import Dict, Iterator, Mapping, MutableMapping, Optional, Tuple


class HeaderMap(MutableMapping[str, str]):
    """삽입 순서를 유지하며 헤더 이름을 대소문자 구분 없이 다루는 매핑.

    같은 이름(대소문자 무시)으로 다시 설정하면 기존 항목을 제거하고 새 값을 뒤에 추가한다.
    원래 표기한 헤더 이름은 마지막으로 설정한 형태를 유지한다.
    """

    def __init__(self, headers: Optional[Mapping[str, str]] = None) -> None:
        self._items: Dict[str, Tuple[str, str]] = {}
        if headers:
            self.update(headers)

    def __getitem__(self, name: str) -> str:
        return self._items[name.lower()][1]

    def __setitem__(self, name: str, value: str) -> None:
        key = name.lower()
        self._items.pop(key, None)
        self._items[key] = (name, str(value))

    def __delitem__(self, name: str) -> None:
        del self._items[name.lower()]

    def __iter__(self) -> Iterator[str]:
        return (name for name, _ in self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._items

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Mapping):
            return NotImplemented
        return dict(self.lower_items()) == {str(k).lower(): str(v) for k, v in other.items()}

    def __repr__(self) -> str:
        return f"HeaderMap({dict(self.items())!r})"

    def lower_items(self) -> Iterator[Tuple[str, str]]:
        return ((key, value) for key, (_, value) in self._items.items())

    def copy(self) -> "HeaderMap":
        return HeaderMap(self)


__all__ = ["HeaderMap"]
