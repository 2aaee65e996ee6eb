"""Process-wide table of namespaces whose pages carry semantic data."""

from __future__ import annotations

import threading
from typing import Dict, Optional

from django.conf import settings

from ..titles import NS_MAIN, NS_PROJECT, NS_TALK, NS_USER

DEFAULT_NAMESPACES_WITH_LINKS: Dict[int, bool] = {
    NS_MAIN: True,
    NS_TALK: True,
    NS_USER: True,
    NS_PROJECT: True,
}

_namespaces: Optional[Dict[int, bool]] = None
_lock = threading.Lock()


def namespaces_with_semantic_links() -> Dict[int, bool]:
    """Return the mutable table, seeding it from settings on first use."""

    global _namespaces
    with _lock:
        if _namespaces is None:
            configured = getattr(settings, "SEMANTIC_NAMESPACES_WITH_LINKS", None)
            source = DEFAULT_NAMESPACES_WITH_LINKS if configured is None else configured
            _namespaces = {int(ns): bool(enabled) for ns, enabled in source.items()}
        return _namespaces


def has_semantic_links(namespace: int) -> bool:
    return namespaces_with_semantic_links().get(namespace, False)


def reset_namespaces() -> None:
    global _namespaces
    with _lock:
        _namespaces = None
