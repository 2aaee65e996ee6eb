"""Rebuild stored semantic data for selected pages or whole namespaces."""

from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError

from semantic_discussions.exceptions import RebuildError
from semantic_discussions.semantic.rebuilder import DataRebuilder, RebuildOptions
from semantic_discussions.semantic.store import get_store


class Command(BaseCommand):
    help = 'Rebuild the semantic data of the given pages or namespaces.'

    def add_arguments(self, parser) -> None:
        parser.add_argument('--page', action='append', default=[], help='Page to rebuild (repeatable).')
        parser.add_argument(
            '--namespace',
            action='append',
            type=int,
            default=[],
            help='Rebuild every page in this namespace id (repeatable).',
        )
        parser.add_argument(
            '--with-update-jobs',
            action='store_true',
            help='Queue update jobs for dependent pages instead of leaving them untouched.',
        )

    def handle(self, *args, **options) -> None:
        if not options['page'] and not options['namespace']:
            raise CommandError('Provide at least one --page or --namespace.')

        rebuild_options = RebuildOptions(
            pages=tuple(options['page']),
            namespaces=tuple(options['namespace']),
            create_update_job=options['with_update_jobs'],
        )
        try:
            rebuilt = DataRebuilder(get_store(), rebuild_options).rebuild()
        except RebuildError as exc:
            raise CommandError(str(exc)) from exc
        self.stdout.write(self.style.SUCCESS(f'Rebuilt {rebuilt} page(s).'))
