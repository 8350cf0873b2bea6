"""
Management command to load the translation catalogue into the local cache.
Usage: python manage.py load_translations [--url URL]
"""

import logging

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from translations.alerts import AlertIcon
from translations.loader import LoaderState, TranslationLoader

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = 'Load translations from the server, falling back to the cached copy'

    def add_arguments(self, parser):
        parser.add_argument(
            '--url',
            type=str,
            default=None,
            help='Translation catalogue URL (defaults to TRANSLATIONS_URL)',
        )

    def handle(self, *args, **options):
        url = options['url'] or getattr(settings, 'TRANSLATIONS_URL', None)

        try:
            loader = TranslationLoader(url, alert=self.write_alert, logger=logger)
        except ValueError as e:
            raise CommandError(str(e))

        loader.load()

        if loader.state == LoaderState.SUCCEEDED:
            self.stdout.write(self.style.SUCCESS(f'Translations loaded from {loader.url}'))
        elif loader.state == LoaderState.CACHE_HIT:
            self.stdout.write(
                self.style.WARNING(f'Translations loaded from cache ({loader.error})')
            )
        else:
            raise CommandError('Translations could not be loaded')

    def write_alert(self, alert):
        style = self.style.ERROR if alert.icon == AlertIcon.ERROR else self.style.WARNING
        self.stderr.write(style(f'{alert.title}: {alert.message}'))
