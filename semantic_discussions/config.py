"""Configuration helpers for the semantic discussions app."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List

import yaml
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from .titles import NAMESPACE_NAMES


@dataclass(frozen=True)
class ExtensionConfig:
    """Typed wrapper around the extension configuration dictionary."""

    raw: Dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.raw.get(key, default)

    @property
    def topic_namespace(self) -> int:
        return int(self.raw['topic_namespace'])

    @property
    def system_user(self) -> str:
        return str(self.raw['system_user'])

    @property
    def annotators(self) -> List[str]:
        return list(self.raw.get('annotators', []))

    @property
    def isolate_cascade_failures(self) -> bool:
        return bool(self.raw.get('isolate_cascade_failures', True))


DEFAULTS: Dict[str, Any] = {
    "topic_namespace": 2600,
    "system_user": "SemanticStructuredDiscussions system user",
    "isolate_cascade_failures": True,
    "annotators": [
        "semantic_discussions.annotators.TopicTitleAnnotator",
        "semantic_discussions.annotators.OwnerAnnotator",
        "semantic_discussions.annotators.CreatorAnnotator",
        "semantic_discussions.annotators.CreationDateAnnotator",
        "semantic_discussions.annotators.ModificationDateAnnotator",
        "semantic_discussions.annotators.ReplyCountAnnotator",
        "semantic_discussions.annotators.LockedAnnotator",
        "semantic_discussions.annotators.SummaryAnnotator",
        "semantic_discussions.annotators.OwnerCategoryAnnotator",
    ],
}


def load_config(path: str | Path | None = None) -> ExtensionConfig:
    """Load configuration from YAML, merging with defaults."""

    data: Dict[str, Any] = DEFAULTS.copy()
    data["annotators"] = list(DEFAULTS["annotators"])

    if path is not None and Path(path).exists():
        with Path(path).open("r", encoding="utf-8") as stream:
            user = yaml.safe_load(stream) or {}
        if not isinstance(user, dict):
            raise ImproperlyConfigured(f"{path} must contain a mapping of options.")
        merge_into(data, user)

    if int(data["topic_namespace"]) not in NAMESPACE_NAMES:
        raise ImproperlyConfigured(f"Unknown topic namespace: {data['topic_namespace']}")
    if not str(data["system_user"]).strip():
        raise ImproperlyConfigured("system_user must not be empty.")

    return ExtensionConfig(data)


def merge_into(base: Dict[str, Any], override: Dict[str, Any]) -> None:
    """Recursively merge override into base dict."""

    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            merge_into(base[key], value)
        else:
            base[key] = value


@lru_cache(maxsize=None)
def get_config() -> ExtensionConfig:
    """Return the process-wide configuration named by ``SEMANTIC_DISCUSSIONS_CONFIG``."""

    return load_config(getattr(settings, 'SEMANTIC_DISCUSSIONS_CONFIG', None))
