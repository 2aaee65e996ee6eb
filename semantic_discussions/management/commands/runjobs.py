"""Drain the queue of deferred semantic update jobs."""

from __future__ import annotations

from django.core.management.base import BaseCommand

from semantic_discussions.semantic.updates import run_update_jobs


class Command(BaseCommand):
    help = 'Run queued semantic update jobs.'

    def add_arguments(self, parser) -> None:
        parser.add_argument('--limit', type=int, default=None, help='Maximum number of jobs to run.')

    def handle(self, *args, **options) -> None:
        processed = run_update_jobs(limit=options['limit'])
        self.stdout.write(self.style.SUCCESS(f'Ran {processed} job(s).'))
