"""Shared service instances used by the discussion hooks.

Every accessor builds its service lazily from the extension configuration
and returns the same instance afterwards. :func:`reset_services` drops the
cached instances so tests can start from a clean slate.
"""

from __future__ import annotations

from functools import lru_cache
from typing import List

from .annotators import AnnotatorStore, DataAnnotator
from .config import get_config
from .repository import TopicRepository
from .semantic.store import Store, get_store
from .signals import user_get_reserved_names


@lru_cache(maxsize=None)
def get_topic_repository() -> TopicRepository:
    return TopicRepository()


@lru_cache(maxsize=None)
def get_annotator_store() -> AnnotatorStore:
    return AnnotatorStore.from_dotted_paths(get_config().annotators)


@lru_cache(maxsize=None)
def get_data_annotator() -> DataAnnotator:
    return DataAnnotator(get_annotator_store())


def get_semantic_store() -> Store:
    return get_store()


def collect_reserved_usernames() -> List[str]:
    """Ask every receiver of ``user_get_reserved_names`` for reserved account names.

    Returns
    -------
    list of str
        The names in the order receivers appended them. Duplicates are kept.
    """

    reserved: List[str] = []
    user_get_reserved_names.send(sender=None, reserved_usernames=reserved)
    return reserved


def reset_services() -> None:
    get_topic_repository.cache_clear()
    get_annotator_store.cache_clear()
    get_data_annotator.cache_clear()
    get_config.cache_clear()
