"""Typed data structures used by the semantic index."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional, Tuple

from ..titles import PageIdentity

TYPE_PAGE = "_wpg"
TYPE_TEXT = "_txt"
TYPE_NUMBER = "_num"
TYPE_DATE = "_dat"
TYPE_BOOLEAN = "_boo"

KNOWN_TYPES = {TYPE_PAGE, TYPE_TEXT, TYPE_NUMBER, TYPE_DATE, TYPE_BOOLEAN}


@dataclass(frozen=True)
class DataItem:
    """A single typed value, stored in its canonical serialized form."""

    type_id: str
    value: str

    @classmethod
    def page(cls, identity: PageIdentity) -> "DataItem":
        return cls(TYPE_PAGE, identity.prefixed_text)

    @classmethod
    def text(cls, value: str) -> "DataItem":
        return cls(TYPE_TEXT, value)

    @classmethod
    def number(cls, value: int | float) -> "DataItem":
        return cls(TYPE_NUMBER, repr(value))

    @classmethod
    def date(cls, value: datetime) -> "DataItem":
        return cls(TYPE_DATE, value.isoformat())

    @classmethod
    def boolean(cls, value: bool) -> "DataItem":
        return cls(TYPE_BOOLEAN, "1" if value else "0")

    def to_python(self) -> Any:
        if self.type_id == TYPE_PAGE:
            return PageIdentity.new_from_text(self.value)
        if self.type_id == TYPE_NUMBER:
            number = float(self.value)
            return int(number) if number.is_integer() else number
        if self.type_id == TYPE_DATE:
            return datetime.fromisoformat(self.value)
        if self.type_id == TYPE_BOOLEAN:
            return self.value == "1"
        return self.value


@dataclass(frozen=True)
class Subject:
    """The page (or special entity) a SemanticData object describes."""

    namespace: int
    text: str

    @classmethod
    def from_identity(cls, identity: PageIdentity) -> "Subject":
        return cls(namespace=identity.namespace, text=identity.text)

    @property
    def title(self) -> Optional[PageIdentity]:
        """Return the page identity, or ``None`` when the subject is not a page."""

        if self.namespace < 0 or not self.text:
            return None
        return PageIdentity(namespace=self.namespace, text=self.text)

    def serialization(self) -> str:
        title = self.title
        return title.prefixed_text if title else f"#{self.namespace}#{self.text}"


@dataclass
class SemanticData:
    """Mutable accumulator of property values for one subject."""

    subject: Subject
    _values: Dict[str, List[DataItem]] = field(default_factory=dict, repr=False)

    def add_property_value(self, property_key: str, item: DataItem) -> None:
        values = self._values.setdefault(property_key, [])
        if item not in values:
            values.append(item)

    def properties(self) -> List[str]:
        return list(self._values)

    def values(self, property_key: str) -> List[DataItem]:
        return list(self._values.get(property_key, []))

    def has_property(self, property_key: str) -> bool:
        return bool(self._values.get(property_key))

    def statements(self) -> List[Tuple[str, DataItem]]:
        return list(iter(self))

    def is_empty(self) -> bool:
        return not any(self._values.values())

    def __iter__(self) -> Iterator[Tuple[str, DataItem]]:
        for property_key, items in self._values.items():
            for item in items:
                yield property_key, item

    def __len__(self) -> int:
        return sum(len(items) for items in self._values.values())
