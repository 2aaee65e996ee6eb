"""The index's own change detection: page saves and the deferred job queue."""

from __future__ import annotations

import logging
from typing import Optional

from ..models import Page, UpdateJob
from ..titles import PageIdentity
from .namespaces import has_semantic_links
from .parser import page_semantic_data
from .rebuilder import DataRebuilder, RebuildOptions
from .store import Store, get_store
from .types import Subject

logger = logging.getLogger(__name__)


def on_page_saved(sender, instance: Page, raw: bool = False, **kwargs) -> None:
    """``post_save`` receiver indexing a page whenever it is edited."""

    if raw or not has_semantic_links(instance.namespace):
        return
    get_store().update_data(page_semantic_data(instance))


def on_page_deleted(sender, instance: Page, **kwargs) -> None:
    """``post_delete`` receiver dropping a page's stored facts."""

    get_store().delete_subject(Subject.from_identity(instance.identity))


def run_update_jobs(store: Optional[Store] = None, limit: Optional[int] = None) -> int:
    """Process queued update jobs in order and return how many ran.

    Jobs for pages that no longer exist are dropped. A failing job stays
    queued and its error propagates.
    """

    store = store or get_store()
    jobs = UpdateJob.objects.order_by("created_at", "pk")
    if limit is not None:
        jobs = jobs[:limit]

    processed = 0
    for job in list(jobs):
        identity = PageIdentity.new_from_text(job.page)
        if identity is None or Page.for_identity(identity) is None:
            logger.info("Dropping update job for missing page %s", job.page)
            job.delete()
            continue
        DataRebuilder(store, RebuildOptions(pages=(job.page,), create_update_job=False)).rebuild()
        job.delete()
        processed += 1
    return processed
