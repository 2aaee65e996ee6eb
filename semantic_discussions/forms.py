"""Forms for the semantic discussions app.

Signup refuses account names reserved by the system, and the discussion
API validates its request parameters with the forms below before a module
touches the database.
"""

from __future__ import annotations

from typing import Callable

from django import forms
from django.contrib.auth import get_user_model
from django.contrib.auth.forms import UserCreationForm

from .config import get_config
from .services import collect_reserved_usernames
from .titles import PageIdentity, normalize_title_text


def _username_key(name: str) -> str:
    return normalize_title_text(name).lower()


def topic_namespace() -> int:
    return get_config().topic_namespace


class PageField(forms.CharField):
    """A page title, cleaned into a :class:`PageIdentity`.

    ``namespace`` may be a callable, resolved each time the field cleans.
    """

    def __init__(self, *, namespace: int | Callable[[], int] | None = None, **kwargs) -> None:
        kwargs.setdefault('max_length', 255)
        super().__init__(**kwargs)
        self.namespace = namespace

    def clean(self, value):  # type: ignore[override]
        value = super().clean(value)
        if not value:
            return None
        identity = PageIdentity.new_from_text(value)
        if identity is None:
            raise forms.ValidationError(f'"{value}" is not a valid page title.')
        namespace = self.namespace() if callable(self.namespace) else self.namespace
        if namespace is not None and identity.namespace != namespace:
            raise forms.ValidationError(f'"{identity}" is not a discussion topic.')
        return identity


class SignUpForm(UserCreationForm):
    """User signup form that refuses reserved account names."""

    email = forms.EmailField(
        required=True,
        help_text='We use your email to send password resets and account notices.',
    )

    class Meta(UserCreationForm.Meta):
        model = get_user_model()
        fields = ('username', 'email')

    def clean_username(self) -> str:
        username = self.cleaned_data['username']
        reserved = {_username_key(name) for name in collect_reserved_usernames()}
        if _username_key(username) in reserved:
            raise forms.ValidationError('This username is reserved for the system.')
        return username

    def save(self, commit: bool = True):  # type: ignore[override]
        user = super().save(commit=False)
        user.email = self.cleaned_data['email']
        if commit:
            user.save()
        return user


class NewTopicForm(forms.Form):
    """Parameters of ``newtopic``: create a topic on a board page."""

    page = PageField()
    topic = forms.CharField(max_length=260, strip=True)
    content = forms.CharField(strip=True)

    def clean_page(self) -> PageIdentity:
        page = self.cleaned_data['page']
        if page.namespace == topic_namespace():
            raise forms.ValidationError('Topics cannot own other topics.')
        return page


class ReplyForm(forms.Form):
    """Parameters of ``reply``: add a post to a topic."""

    page = PageField(namespace=topic_namespace)
    content = forms.CharField(strip=True)
    reply_to = forms.IntegerField(required=False, min_value=1)


class EditTopicSummaryForm(forms.Form):
    """Parameters of ``edit-topic-summary``."""

    page = PageField(namespace=topic_namespace)
    summary = forms.CharField(required=False, strip=True)


class LockTopicForm(forms.Form):
    """Parameters of ``lock-topic``."""

    page = PageField(namespace=topic_namespace)
    locked = forms.BooleanField(required=False)


class ViewForm(forms.Form):
    """Parameters of the read-only modules."""

    page = PageField()
