"""Registry of predefined properties known to the semantic index."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Dict, List, Optional

from ..exceptions import PropertyRegistrationError
from ..signals import init_properties
from .types import KNOWN_TYPES, TYPE_DATE, TYPE_PAGE

logger = logging.getLogger(__name__)

CATEGORY_PROPERTY = "_INST"
MODIFICATION_DATE_PROPERTY = "_MDAT"


@dataclass(frozen=True)
class PropertyDefinition:
    """Declaration of one predefined property."""

    key: str
    type_id: str
    label: str
    visible: bool = True
    annotable: bool = False


class PropertyRegistry:
    """Holds property declarations and rejects conflicting ones."""

    def __init__(self) -> None:
        self._definitions: Dict[str, PropertyDefinition] = {}
        self._labels: Dict[str, str] = {}
        self.register_property(CATEGORY_PROPERTY, TYPE_PAGE, "Category", visible=True, annotable=False)
        self.register_property(MODIFICATION_DATE_PROPERTY, TYPE_DATE, "Modification date", visible=True)

    def register_property(
        self,
        key: str,
        type_id: str,
        label: str,
        *,
        visible: bool = True,
        annotable: bool = False,
    ) -> PropertyDefinition:
        """Declare a predefined property.

        Declaring the same definition twice is accepted. Any conflict with an
        existing key or label raises :class:`PropertyRegistrationError`.
        """

        if not key.startswith("_"):
            raise PropertyRegistrationError(f"Predefined property keys must start with '_': {key!r}")
        if type_id not in KNOWN_TYPES:
            raise PropertyRegistrationError(f"Unknown type {type_id!r} for property {key!r}")
        if not label.strip():
            raise PropertyRegistrationError(f"Property {key!r} needs a label")

        definition = PropertyDefinition(key, type_id, label.strip(), visible, annotable)
        existing = self._definitions.get(key)
        if existing is not None:
            if existing != definition:
                raise PropertyRegistrationError(f"Property {key!r} is already declared as {existing}")
            return existing

        label_key = definition.label.lower()
        owner = self._labels.get(label_key)
        if owner is not None and owner != key:
            raise PropertyRegistrationError(f"Label {definition.label!r} is already used by {owner!r}")

        self._definitions[key] = definition
        self._labels[label_key] = key
        logger.debug("Registered property %s (%s, %s)", key, definition.label, type_id)
        return definition

    def get_definition(self, key: str) -> Optional[PropertyDefinition]:
        return self._definitions.get(key)

    def find_property_by_label(self, label: str) -> Optional[PropertyDefinition]:
        key = self._labels.get(label.strip().replace("_", " ").lower())
        return self._definitions[key] if key else None

    def is_registered(self, key: str) -> bool:
        return key in self._definitions

    def definitions(self) -> List[PropertyDefinition]:
        return list(self._definitions.values())


_registry: Optional[PropertyRegistry] = None
_registry_lock = threading.Lock()


def get_property_registry() -> PropertyRegistry:
    """Return the shared registry, firing ``init_properties`` when it is first built."""

    global _registry
    with _registry_lock:
        if _registry is None:
            registry = PropertyRegistry()
            init_properties.send(sender=PropertyRegistry, property_registry=registry)
            _registry = registry
        return _registry


def reset_property_registry() -> None:
    global _registry
    with _registry_lock:
        _registry = None
