"""Extraction of in-text annotations from page wikitext."""

from __future__ import annotations

import logging
import re
from typing import List, Tuple

from ..titles import NS_CATEGORY, PageIdentity
from .registry import CATEGORY_PROPERTY, MODIFICATION_DATE_PROPERTY, PropertyRegistry, get_property_registry
from .types import DataItem, SemanticData, Subject

logger = logging.getLogger(__name__)

ANNOTATION = re.compile(r"\[\[\s*([^:\[\]|]+?)\s*::\s*([^\[\]|]*?)\s*(?:\|[^\[\]]*)?\]\]")
CATEGORY_LINK = re.compile(r"\[\[\s*Category\s*:\s*([^\[\]|]+?)\s*(?:\|[^\[\]]*)?\]\]", re.IGNORECASE)


def property_key_for_label(label: str) -> str:
    """Return the storage key used for a user-defined property label."""

    return re.sub(r"[\s_]+", "_", label.strip())


def parse_annotations(text: str, registry: PropertyRegistry | None = None) -> List[Tuple[str, DataItem]]:
    """Return ``(property_key, item)`` pairs for every annotation in ``text``."""

    registry = registry or get_property_registry()
    statements: List[Tuple[str, DataItem]] = []

    for match in ANNOTATION.finditer(text or ""):
        label, raw_value = match.group(1), match.group(2)
        if not raw_value:
            continue
        definition = registry.find_property_by_label(label)
        if definition is not None:
            if not definition.annotable:
                logger.debug("Ignoring annotation of non-annotable property %s", definition.key)
                continue
            statements.append((definition.key, DataItem(definition.type_id, raw_value)))
            continue

        identity = PageIdentity.new_from_text(raw_value)
        item = DataItem.page(identity) if identity else DataItem.text(raw_value)
        statements.append((property_key_for_label(label), item))

    for match in CATEGORY_LINK.finditer(text or ""):
        identity = PageIdentity.new_from_text(match.group(1), default_namespace=NS_CATEGORY)
        if identity is None:
            continue
        statements.append((CATEGORY_PROPERTY, DataItem.page(PageIdentity(NS_CATEGORY, identity.text))))

    return statements


def page_semantic_data(page) -> SemanticData:
    """Build the SemanticData of a stored :class:`~semantic_discussions.models.Page`."""

    data = SemanticData(Subject.from_identity(page.identity))
    for property_key, item in parse_annotations(page.text):
        data.add_property_value(property_key, item)
    if page.touched is not None:
        data.add_property_value(MODIFICATION_DATE_PROPERTY, DataItem.date(page.touched))
    return data
