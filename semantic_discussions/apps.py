from django.apps import AppConfig


class SemanticDiscussionsConfig(AppConfig):
    """Configuration for the semantic discussions Django app."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'semantic_discussions'
    verbose_name = 'Semantic discussions'

    def ready(self) -> None:
        from . import hooks

        hooks.connect()
        hooks.on_register_extension()
