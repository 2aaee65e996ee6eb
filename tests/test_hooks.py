"""Unit tests for the discussion index receivers, with collaborators mocked."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock, call, patch

import pytest

from semantic_discussions import hooks
from semantic_discussions.config import ExtensionConfig, load_config
from semantic_discussions.exceptions import CascadeRebuildError, PropertyRegistrationError, RebuildError
from semantic_discussions.semantic.namespaces import namespaces_with_semantic_links
from semantic_discussions.semantic.rebuilder import RebuildOptions
from semantic_discussions.semantic.registry import PropertyRegistry
from semantic_discussions.semantic.types import DataItem, SemanticData, Subject
from semantic_discussions.titles import NS_SPECIAL, NS_TALK, NS_TOPIC, PageIdentity


def _data(namespace: int, text: str) -> SemanticData:
    return SemanticData(Subject(namespace=namespace, text=text))


def _topic(title: str | None) -> SimpleNamespace:
    identity = PageIdentity.new_from_text(title) if title else None
    return SimpleNamespace(title=title, get_topic_title=lambda: identity)


class FakeModule:
    def __init__(self, write: bool, params: dict) -> None:
        self.write = write
        self.params = params

    def is_write_mode(self) -> bool:
        return self.write

    def get_request(self) -> dict:
        return self.params


@pytest.fixture()
def repository():
    repo = MagicMock()
    repo.get_by_title.return_value = None
    repo.get_by_owner.return_value = []
    with patch("semantic_discussions.hooks.services.get_topic_repository", return_value=repo):
        yield repo


@pytest.fixture()
def annotator():
    data_annotator = MagicMock()
    with patch("semantic_discussions.hooks.services.get_data_annotator", return_value=data_annotator):
        yield data_annotator


@pytest.fixture()
def rebuild():
    with patch("semantic_discussions.hooks.rebuild_for_page") as mocked:
        yield mocked


def test_register_extension_enables_topic_namespace():
    table = namespaces_with_semantic_links()
    table[NS_TOPIC] = False

    hooks.on_register_extension()
    hooks.on_register_extension()

    assert table[NS_TOPIC] is True


def test_init_properties_declares_one_property_per_annotator():
    registry = PropertyRegistry()

    hooks.on_init_properties(sender=PropertyRegistry, property_registry=registry)

    definition = registry.get_definition("_SSD_OWNER")
    assert definition is not None
    assert definition.label == "Topic owner"
    assert not definition.annotable


def test_init_properties_propagates_registry_rejection():
    registry = MagicMock()
    registry.register_property.side_effect = PropertyRegistrationError("duplicate")

    with pytest.raises(PropertyRegistrationError):
        hooks.on_init_properties(sender=PropertyRegistry, property_registry=registry)


def test_before_update_ignores_subjects_without_a_page(repository, annotator):
    data = _data(NS_SPECIAL, "RecentChanges")

    hooks.on_before_data_update_complete(sender=None, store=MagicMock(), semantic_data=data)

    repository.get_by_title.assert_not_called()
    annotator.add_annotations.assert_not_called()


def test_before_update_is_a_no_op_for_pages_without_topic(repository, annotator):
    data = _data(NS_TALK, "Example")
    data.add_property_value("Has_color", DataItem.text("Red"))

    hooks.on_before_data_update_complete(sender=None, store=MagicMock(), semantic_data=data)

    repository.get_by_title.assert_called_once_with(PageIdentity(NS_TALK, "Example"))
    annotator.add_annotations.assert_not_called()
    assert data.statements() == [("Has_color", DataItem.text("Red"))]


def test_before_update_annotates_topic_pages_in_place(repository, annotator):
    topic = _topic("Topic:Example/T1")
    repository.get_by_title.return_value = topic
    data = _data(NS_TOPIC, "Example/T1")

    hooks.on_before_data_update_complete(sender=None, store=MagicMock(), semantic_data=data)

    annotator.add_annotations.assert_called_once_with(topic, data)


def test_after_update_ignores_subjects_without_a_page(repository, rebuild):
    hooks.on_after_data_update_complete(sender=None, store=MagicMock(), semantic_data=_data(NS_SPECIAL, "Foo"))

    repository.get_by_owner.assert_not_called()
    rebuild.assert_not_called()


def test_after_update_without_owned_topics_rebuilds_nothing(repository, rebuild):
    hooks.on_after_data_update_complete(sender=None, store=MagicMock(), semantic_data=_data(NS_TALK, "Empty"))

    repository.get_by_owner.assert_called_once_with(PageIdentity(NS_TALK, "Empty"))
    rebuild.assert_not_called()


def test_after_update_rebuilds_each_owned_topic(repository, rebuild):
    repository.get_by_owner.return_value = [_topic("Topic:Example/T1"), _topic("Topic:Example/T2")]
    store = MagicMock()

    hooks.on_after_data_update_complete(sender=None, store=store, semantic_data=_data(NS_TALK, "Example"))

    assert rebuild.call_args_list == [
        call("Topic:Example/T1", store=store),
        call("Topic:Example/T2", store=store),
    ]


def test_after_update_skips_topics_without_a_title(repository, rebuild):
    repository.get_by_owner.return_value = [_topic(None), _topic("Topic:Example/T2")]

    hooks.on_after_data_update_complete(sender=None, store=MagicMock(), semantic_data=_data(NS_TALK, "Example"))

    rebuild.assert_called_once()
    assert rebuild.call_args.args == ("Topic:Example/T2",)


def test_after_update_attempts_every_topic_before_raising(repository, rebuild):
    repository.get_by_owner.return_value = [_topic("Topic:Example/T1"), _topic("Topic:Example/T2")]
    failure = RebuildError("Topic:Example/T1", "page does not exist")
    rebuild.side_effect = [failure, None]

    with pytest.raises(CascadeRebuildError) as excinfo:
        hooks.on_after_data_update_complete(sender=None, store=MagicMock(), semantic_data=_data(NS_TALK, "Example"))

    assert rebuild.call_count == 2
    assert excinfo.value.owner == "Talk:Example"
    assert excinfo.value.failures == [("Topic:Example/T1", failure)]
    assert excinfo.value.__cause__ is failure


def test_after_update_can_abort_on_first_failure(repository, rebuild):
    repository.get_by_owner.return_value = [_topic("Topic:Example/T1"), _topic("Topic:Example/T2")]
    rebuild.side_effect = RebuildError("Topic:Example/T1", "page does not exist")
    raw = dict(load_config(None).raw, isolate_cascade_failures=False)

    with patch("semantic_discussions.hooks.get_config", return_value=ExtensionConfig(raw)):
        with pytest.raises(RebuildError):
            hooks.on_after_data_update_complete(
                sender=None, store=MagicMock(), semantic_data=_data(NS_TALK, "Example")
            )

    assert rebuild.call_count == 1


def test_read_only_api_calls_never_rebuild(rebuild):
    hooks.on_api_flow_after_execute(sender=None, module=FakeModule(False, {"page": "Topic:Example/T1"}))

    rebuild.assert_not_called()


def test_write_api_calls_without_page_do_nothing(rebuild):
    hooks.on_api_flow_after_execute(sender=None, module=FakeModule(True, {}))

    rebuild.assert_not_called()


def test_write_api_calls_rebuild_the_page_once(rebuild):
    hooks.on_api_flow_after_execute(sender=None, module=FakeModule(True, {"page": "Topic:Example/T1"}))

    rebuild.assert_called_once_with("Topic:Example/T1")


def test_reserved_names_are_appended_without_touching_existing_entries():
    reserved = ["Alpha", "Beta"]

    for _ in range(3):
        hooks.on_user_get_reserved_names(sender=None, reserved_usernames=reserved)

    assert reserved[:2] == ["Alpha", "Beta"]
    assert reserved[2:] == ["SemanticStructuredDiscussions system user"] * 3


def test_rebuild_for_page_runs_a_single_page_rebuild_without_update_jobs():
    store = MagicMock()
    with patch("semantic_discussions.hooks.DataRebuilder") as rebuilder_class:
        hooks.rebuild_for_page("Topic:Example/T1", store=store)

    rebuilder_class.assert_called_once_with(
        store,
        RebuildOptions(pages=("Topic:Example/T1",), create_update_job=False),
    )
    rebuilder_class.return_value.rebuild.assert_called_once_with()


def test_rebuild_for_page_propagates_rebuild_errors():
    with patch("semantic_discussions.hooks.DataRebuilder") as rebuilder_class:
        rebuilder_class.return_value.rebuild.side_effect = RebuildError("Nope", "page does not exist")
        with pytest.raises(RebuildError):
            hooks.rebuild_for_page("Nope", store=MagicMock())


def test_rebuild_for_page_skips_pages_already_being_rebuilt():
    calls = []

    def rebuild_again():
        calls.append("outer")
        hooks.rebuild_for_page("talk:example", store=MagicMock())

    with patch("semantic_discussions.hooks.DataRebuilder") as rebuilder_class:
        rebuilder_class.return_value.rebuild.side_effect = rebuild_again
        hooks.rebuild_for_page("Talk:Example", store=MagicMock())

    assert calls == ["outer"]
    assert rebuilder_class.call_count == 1
