"""Synchronous rebuilding of stored semantic data."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Tuple

from ..exceptions import RebuildError
from ..models import Page
from ..titles import PageIdentity
from .namespaces import has_semantic_links
from .parser import page_semantic_data
from .store import Store

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RebuildOptions:
    """Which pages to rebuild and whether the rebuild may queue update jobs."""

    pages: Tuple[str, ...] = ()
    namespaces: Tuple[int, ...] = ()
    create_update_job: bool = False


class DataRebuilder:
    """Rebuilds the semantic data of the selected pages, one at a time, inline."""

    def __init__(self, store: Store, options: RebuildOptions) -> None:
        self.store = store
        self.options = options

    def rebuild(self) -> int:
        """Rebuild every selected page and return how many were stored."""

        rebuilt = 0
        for identity in self._selected_pages():
            if not has_semantic_links(identity.namespace):
                logger.debug("Skipping %s: namespace %d has no semantic links", identity, identity.namespace)
                continue
            page = Page.for_identity(identity)
            if page is None:
                raise RebuildError(identity.prefixed_text, "page does not exist")
            self.store.update_data(page_semantic_data(page), create_update_job=self.options.create_update_job)
            rebuilt += 1
        return rebuilt

    def _selected_pages(self) -> List[PageIdentity]:
        selected: List[PageIdentity] = []
        for name in self.options.pages:
            identity = PageIdentity.new_from_text(name)
            if identity is None:
                raise RebuildError(name, "not a valid page title")
            selected.append(identity)
        if self.options.namespaces:
            selected.extend(_pages_in_namespaces(self.options.namespaces))
        return selected


def _pages_in_namespaces(namespaces: Iterable[int]) -> List[PageIdentity]:
    pages = Page.objects.filter(namespace__in=list(namespaces)).order_by("namespace", "title")
    return [page.identity for page in pages]
