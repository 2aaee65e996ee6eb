"""Receivers keeping the semantic index in step with discussion content.

The index cannot see which topics a page owns, nor notice writes made
through the discussion API, so these receivers do it on its behalf:

* before a page's facts are written, facts derived from its topic are added;
* after a page's facts are written, every topic it owns is rebuilt inline;
* after a write through the discussion API, the written page is rebuilt
  inline, whether or not the index noticed a change.

Forced rebuilds never queue update jobs. Any failure propagates to whoever
triggered the event, so a failed rebuild fails the edit or API write that
caused it.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from typing import FrozenSet, Iterator, List, Tuple

from django.db.models.signals import post_delete, post_save

from . import services
from .config import get_config
from .exceptions import CascadeRebuildError
from .properties import PropertyInitializer
from .semantic.namespaces import namespaces_with_semantic_links
from .semantic.rebuilder import DataRebuilder, RebuildOptions
from .semantic.registry import PropertyRegistry
from .semantic.store import Store
from .semantic.types import SemanticData
from .signals import (
    after_data_update_complete,
    api_flow_after_execute,
    before_data_update_complete,
    init_properties,
    user_get_reserved_names,
)
from .titles import PageIdentity

logger = logging.getLogger(__name__)

# Pages being rebuilt (or cascading to their topics) further up the call stack
_in_flight: ContextVar[FrozenSet[str]] = ContextVar('semantic_discussions_in_flight', default=frozenset())


@contextmanager
def _rebuilding(page_name: str) -> Iterator[None]:
    token = _in_flight.set(_in_flight.get() | {page_name})
    try:
        yield
    finally:
        _in_flight.reset(token)


def on_register_extension() -> None:
    """Enable semantic links for the topic namespace."""

    namespaces_with_semantic_links()[get_config().topic_namespace] = True


def on_init_properties(sender, property_registry: PropertyRegistry, **kwargs) -> None:
    initializer = PropertyInitializer(property_registry, services.get_annotator_store())
    initializer.initialize_properties()


def on_before_data_update_complete(sender, store: Store, semantic_data: SemanticData, **kwargs) -> None:
    """Add the facts of the topic behind this page, if there is one."""

    title = semantic_data.subject.title
    if title is None:
        return

    topic = services.get_topic_repository().get_by_title(title)
    if topic is None:
        return

    services.get_data_annotator().add_annotations(topic, semantic_data)


def on_after_data_update_complete(sender, store: Store, semantic_data: SemanticData, **kwargs) -> None:
    """Rebuild every topic owned by the page whose facts were just written."""

    title = semantic_data.subject.title
    if title is None:
        return

    topics = services.get_topic_repository().get_by_owner(title)
    if not topics:
        return

    owner = title.prefixed_text
    isolate = get_config().isolate_cascade_failures
    failures: List[Tuple[str, Exception]] = []

    with _rebuilding(owner):
        for topic in topics:
            topic_title = topic.get_topic_title()
            if topic_title is None:
                continue
            try:
                rebuild_for_page(topic_title.prefixed_text, store=store)
            except Exception as exc:
                if not isolate:
                    raise
                logger.error('Rebuilding %s after %s changed failed: %s', topic_title, owner, exc)
                failures.append((topic_title.prefixed_text, exc))

    if failures:
        raise CascadeRebuildError(owner, failures) from failures[0][1]


def on_api_flow_after_execute(sender, module, **kwargs) -> None:
    """Rebuild the page a discussion API write operated on."""

    if not module.is_write_mode():
        return

    page = module.get_request().get('page')
    if page is None:
        return

    rebuild_for_page(page)


def on_user_get_reserved_names(sender, reserved_usernames: List[str], **kwargs) -> None:
    reserved_usernames.append(get_config().system_user)


def rebuild_for_page(page_name: str, store: Store | None = None) -> None:
    """Rebuild the semantic data of one page now, without queuing update jobs.

    A page already being rebuilt further up the call stack is skipped.
    """

    identity = PageIdentity.new_from_text(page_name)
    key = identity.prefixed_text if identity else page_name
    if key in _in_flight.get():
        logger.warning('Skipping re-entrant rebuild of %s', key)
        return

    store = store or services.get_semantic_store()
    rebuilder = DataRebuilder(store, RebuildOptions(pages=(page_name,), create_update_job=False))

    with _rebuilding(key):
        logger.info('Forcing rebuild of %s', page_name)
        rebuilder.rebuild()


def connect() -> None:
    """Connect every receiver to its signal."""

    from .models import Page
    from .semantic.updates import on_page_deleted, on_page_saved

    init_properties.connect(on_init_properties, dispatch_uid='ssd.init_properties')
    before_data_update_complete.connect(on_before_data_update_complete, dispatch_uid='ssd.before_update')
    after_data_update_complete.connect(on_after_data_update_complete, dispatch_uid='ssd.after_update')
    api_flow_after_execute.connect(on_api_flow_after_execute, dispatch_uid='ssd.api_after_execute')
    user_get_reserved_names.connect(on_user_get_reserved_names, dispatch_uid='ssd.reserved_names')
    post_save.connect(on_page_saved, sender=Page, dispatch_uid='ssd.page_saved')
    post_delete.connect(on_page_deleted, sender=Page, dispatch_uid='ssd.page_deleted')
