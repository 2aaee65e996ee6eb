"""Property declarations and in-text annotation parsing."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from semantic_discussions.annotators import Annotator, AnnotatorStore
from semantic_discussions.exceptions import PropertyRegistrationError
from semantic_discussions.models import Page
from semantic_discussions.semantic.parser import page_semantic_data, parse_annotations
from semantic_discussions.semantic.registry import PropertyRegistry, get_property_registry
from semantic_discussions.semantic.types import TYPE_NUMBER, TYPE_PAGE, TYPE_TEXT, DataItem
from semantic_discussions.titles import NS_CATEGORY, NS_TALK, PageIdentity


@pytest.fixture()
def registry():
    return PropertyRegistry()


def test_registry_starts_with_core_properties(registry):
    assert [definition.key for definition in registry.definitions()] == ["_INST", "_MDAT"]
    assert registry.find_property_by_label("category").key == "_INST"
    assert registry.is_registered("_MDAT")


def test_identical_declarations_are_accepted(registry):
    first = registry.register_property("_X", TYPE_TEXT, "Example")
    second = registry.register_property("_X", TYPE_TEXT, "Example")

    assert first == second


@pytest.mark.parametrize(
    "key, type_id, label",
    [
        ("X", TYPE_TEXT, "No underscore"),
        ("_X", "_unknown", "Bad type"),
        ("_X", TYPE_TEXT, "  "),
        ("_INST", TYPE_NUMBER, "Category"),
        ("_OTHER", TYPE_TEXT, "Modification date"),
    ],
)
def test_conflicting_declarations_are_rejected(registry, key, type_id, label):
    with pytest.raises(PropertyRegistrationError):
        registry.register_property(key, type_id, label)


def test_shared_registry_contains_discussion_properties():
    registry = get_property_registry()

    assert registry.get_definition("_SSD_REPLY_COUNT").type_id == TYPE_NUMBER
    assert registry.find_property_by_label("Topic owner").key == "_SSD_OWNER"


def test_rejected_declarations_leave_no_registry_behind():
    class MisnamedAnnotator(Annotator):
        key = "SSD_MISNAMED"
        label = "Misnamed"

    with patch(
        "semantic_discussions.hooks.services.get_annotator_store",
        return_value=AnnotatorStore([MisnamedAnnotator]),
    ):
        with pytest.raises(PropertyRegistrationError):
            get_property_registry()

    assert get_property_registry().is_registered("_SSD_OWNER")


def test_parse_annotations_reads_properties_and_categories():
    text = (
        "Status is [[Has status::Open]], size [[Has size::12 cm|twelve]] "
        "[[Category:Boards]] [[category:Help desk|sort key]]"
    )

    statements = parse_annotations(text)

    assert statements == [
        ("Has_status", DataItem.page(PageIdentity.new_from_text("Open"))),
        ("Has_size", DataItem.page(PageIdentity.new_from_text("12 cm"))),
        ("_INST", DataItem.page(PageIdentity(NS_CATEGORY, "Boards"))),
        ("_INST", DataItem.page(PageIdentity(NS_CATEGORY, "Help desk"))),
    ]


def test_parse_annotations_falls_back_to_text_values():
    assert parse_annotations("[[Has note::a {template} value]]") == [
        ("Has_note", DataItem.text("a {template} value")),
    ]


def test_non_annotable_properties_cannot_be_set_in_text():
    assert parse_annotations("[[Topic owner::Talk:Elsewhere]]") == []


def test_page_semantic_data_builds_facts_for_a_page():
    page = Page(namespace=NS_TALK, title="Example", text="[[Has status::Open]]")

    data = page_semantic_data(page)

    assert data.subject.title == PageIdentity(NS_TALK, "Example")
    assert data.values("Has_status")[0].type_id == TYPE_PAGE
    assert not data.has_property("_MDAT")
