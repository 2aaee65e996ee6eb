"""End-to-end behaviour of owner edits cascading to their topics."""

from __future__ import annotations

from unittest.mock import ANY, call, patch

import pytest

from semantic_discussions import hooks
from semantic_discussions.exceptions import CascadeRebuildError
from semantic_discussions.models import Page, Topic, UpdateJob
from semantic_discussions.semantic.store import get_store
from semantic_discussions.semantic.types import DataItem, Subject
from semantic_discussions.titles import NS_CATEGORY, NS_TALK, PageIdentity


def _facts(title: str):
    identity = PageIdentity.new_from_text(title)
    return get_store().get_semantic_data(Subject.from_identity(identity))


@pytest.fixture()
def board(make_page, make_topic):
    make_page("Talk:Example", "Talk page for [[Has status::Draft]]", content_model=Page.CONTENT_BOARD)
    make_topic("Topic:Example/T1", "Talk:Example", subject="First")
    make_topic("Topic:Example/T2", "Talk:Example", subject="Second")
    return Page.objects.get(namespace=NS_TALK, title="Example")


def test_topic_pages_are_annotated_when_indexed(board):
    data = _facts("Topic:Example/T1")

    assert data.values("_SSD_TOPIC_TITLE") == [DataItem.text("First")]
    assert data.values("_SSD_OWNER") == [DataItem.page(PageIdentity(NS_TALK, "Example"))]
    assert data.values("_SSD_REPLY_COUNT") == [DataItem.number(0)]


def test_editing_the_owner_rebuilds_exactly_its_topics(board):
    board.text = "[[Category:Archived]] [[Has status::Done]]"

    with patch("semantic_discussions.hooks.rebuild_for_page", wraps=hooks.rebuild_for_page) as rebuild:
        board.save()

    assert rebuild.call_args_list == [
        call("Topic:Example/T1", store=ANY),
        call("Topic:Example/T2", store=ANY),
    ]


def test_owner_edits_refresh_owner_derived_topic_facts(board):
    archived = DataItem.page(PageIdentity(NS_CATEGORY, "Archived"))
    assert _facts("Topic:Example/T1").values("_SSD_OWNER_CATEGORY") == []

    board.text = "[[Category:Archived]]"
    board.save()

    for title in ("Topic:Example/T1", "Topic:Example/T2"):
        assert _facts(title).values("_SSD_OWNER_CATEGORY") == [archived]


def test_forced_rebuilds_do_not_queue_update_jobs(board):
    UpdateJob.objects.all().delete()

    hooks.rebuild_for_page("Talk:Example")

    assert not UpdateJob.objects.exists()
    assert _facts("Talk:Example").values("Has_status") == [DataItem.page(PageIdentity.new_from_text("Draft"))]


def test_plain_edits_still_queue_jobs_for_dependent_pages(board):
    UpdateJob.objects.all().delete()

    board.save()

    assert sorted(UpdateJob.objects.values_list("page", flat=True)) == ["Topic:Example/T1", "Topic:Example/T2"]


def test_missing_topic_page_fails_the_owner_edit_after_trying_the_rest(board):
    Topic.objects.create(title="Topic:Example/Orphan", owner="Talk:Example", subject="No page")
    board.text = "[[Category:Archived]]"

    with pytest.raises(CascadeRebuildError) as excinfo:
        board.save()

    assert [page for page, _ in excinfo.value.failures] == ["Topic:Example/Orphan"]
