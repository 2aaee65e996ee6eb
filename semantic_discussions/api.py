"""Discussion API modules.

Each module validates its request parameters with a form, executes against
the discussion tables and returns a JSON-serialisable result.
:func:`execute_module` sends ``api_flow_after_execute`` once the module has
run, which is where forced re-indexing of written pages hooks in.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Type

from django import forms as django_forms
from django.db import transaction
from django.utils import timezone

from . import forms
from .config import get_config
from .exceptions import ApiUsageError
from .models import Page, Post, Topic
from .signals import api_flow_after_execute
from .titles import PageIdentity

# Length of Topic.title
MAX_TOPIC_TITLE_LENGTH = Topic._meta.get_field('title').max_length


class ApiModule:
    """Base class for discussion API modules."""

    name: str = ''
    write_mode: bool = False
    form_class: Type[django_forms.Form] = forms.ViewForm

    def __init__(self, params: Mapping[str, Any], user: str = '') -> None:
        self._params = params
        self.user = user or get_config().system_user

    def is_write_mode(self) -> bool:
        return self.write_mode

    def get_request(self) -> Mapping[str, Any]:
        return self._params

    def clean(self) -> Dict[str, Any]:
        form = self.form_class(self._params)
        if not form.is_valid():
            field, errors = next(iter(form.errors.items()))
            raise ApiUsageError(f'bad-{field}', errors[0])
        return form.cleaned_data

    def execute(self) -> Dict[str, Any]:
        raise NotImplementedError

    def _get_topic(self, title: PageIdentity) -> Topic:
        topic = Topic.objects.filter(title=title.prefixed_text).first()
        if topic is None:
            raise ApiUsageError('invalid-workflow', f'There is no topic at {title}.')
        return topic


def _topic_payload(topic: Topic) -> Dict[str, Any]:
    return {
        'title': topic.title,
        'owner': topic.owner,
        'topic': topic.subject,
        'summary': topic.summary,
        'creator': topic.creator,
        'locked': topic.locked,
        'posts': [
            {
                'id': post.pk,
                'author': post.author,
                'content': post.content,
                'reply_to': post.reply_to_id,
            }
            for post in topic.posts.all()
        ],
    }


class NewTopicModule(ApiModule):
    name = 'newtopic'
    write_mode = True
    form_class = forms.NewTopicForm

    def execute(self) -> Dict[str, Any]:
        data = self.clean()
        owner: PageIdentity = data['page']
        Page.objects.get_or_create(
            namespace=owner.namespace,
            title=owner.text,
            defaults={'content_model': Page.CONTENT_BOARD},
        )

        title = _unique_topic_title(owner, data['topic'])
        topic = Topic.objects.create(
            title=title.prefixed_text,
            owner=owner.prefixed_text,
            subject=data['topic'],
            creator=self.user,
        )
        Post.objects.create(topic=topic, author=self.user, content=data['content'])
        Page.objects.create(namespace=title.namespace, title=title.text, content_model=Page.CONTENT_TOPIC)
        return {'status': 'ok', 'topic': topic.title}


class ReplyModule(ApiModule):
    name = 'reply'
    write_mode = True
    form_class = forms.ReplyForm

    def execute(self) -> Dict[str, Any]:
        data = self.clean()
        topic = self._get_topic(data['page'])
        if topic.locked:
            raise ApiUsageError('topic-locked', f'{topic.title} is locked.')

        posts = topic.posts.all()
        parent = posts.filter(pk=data['reply_to']).first() if data.get('reply_to') else posts.first()
        if parent is None:
            raise ApiUsageError('invalid-reply-to', 'The post being replied to does not exist.')

        post = Post.objects.create(topic=topic, reply_to=parent, author=self.user, content=data['content'])
        topic.modified_at = timezone.now()
        topic.save(update_fields=['modified_at'])
        return {'status': 'ok', 'post': post.pk}


class EditTopicSummaryModule(ApiModule):
    name = 'edit-topic-summary'
    write_mode = True
    form_class = forms.EditTopicSummaryForm

    def execute(self) -> Dict[str, Any]:
        data = self.clean()
        topic = self._get_topic(data['page'])
        topic.summary = data['summary']
        topic.save(update_fields=['summary', 'modified_at'])
        return {'status': 'ok', 'summary': topic.summary}


class LockTopicModule(ApiModule):
    name = 'lock-topic'
    write_mode = True
    form_class = forms.LockTopicForm

    def execute(self) -> Dict[str, Any]:
        data = self.clean()
        topic = self._get_topic(data['page'])
        topic.locked = data['locked']
        topic.save(update_fields=['locked', 'modified_at'])
        return {'status': 'ok', 'locked': topic.locked}


class ViewTopicModule(ApiModule):
    name = 'view-topic'

    def execute(self) -> Dict[str, Any]:
        data = self.clean()
        return _topic_payload(self._get_topic(data['page']))


class ViewTopicListModule(ApiModule):
    name = 'view-topiclist'

    def execute(self) -> Dict[str, Any]:
        data = self.clean()
        owner: PageIdentity = data['page']
        topics = Topic.objects.filter(owner=owner.prefixed_text)
        return {
            'owner': owner.prefixed_text,
            'topics': [{'title': topic.title, 'topic': topic.subject} for topic in topics],
        }


MODULES: Dict[str, Type[ApiModule]] = {
    module.name: module
    for module in (
        NewTopicModule,
        ReplyModule,
        EditTopicSummaryModule,
        LockTopicModule,
        ViewTopicModule,
        ViewTopicListModule,
    )
}


def _unique_topic_title(owner: PageIdentity, subject: str) -> PageIdentity:
    """Return a free ``Topic:<owner>/<subject>`` title, suffixing a counter if needed."""

    topic_namespace = get_config().topic_namespace
    base = f'{owner.text}/{subject}'
    candidate = PageIdentity.new_from_text(base, default_namespace=topic_namespace)
    if candidate is None or candidate.namespace != topic_namespace:
        raise ApiUsageError('bad-topic', f'"{subject}" cannot be used as a topic title.')

    counter = 1
    title = candidate
    while Topic.objects.filter(title=title.prefixed_text).exists():
        counter += 1
        title = PageIdentity(topic_namespace, f'{candidate.text} ({counter})')
    if len(title.prefixed_text) > MAX_TOPIC_TITLE_LENGTH:
        raise ApiUsageError('bad-topic', f'The topic title for "{subject}" on {owner} is too long.')
    return title


def execute_module(module: ApiModule) -> Dict[str, Any]:
    """Run ``module`` and notify ``api_flow_after_execute`` receivers.

    Both happen in one transaction, so a receiver failure undoes the write.
    """

    with transaction.atomic():
        result = module.execute()
        api_flow_after_execute.send(sender=type(module), module=module)
    return result
