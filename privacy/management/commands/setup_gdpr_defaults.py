"""
Django management command to seed the GDPR cookie settings.

Stores default banner text and a "Strictly necessary" cookie category so
the settings page and API start from a usable state. Existing values are
kept unless --force is given. The request queue is only created when it
is missing and is never overwritten.

Usage:
    python manage.py setup_gdpr_defaults
    python manage.py setup_gdpr_defaults --force
"""

from django.core.management.base import BaseCommand
from django.db import transaction

from core.models import Option
from core.options import OptionStore

from privacy.constants import (
    OPTION_BANNER_CONTENT,
    OPTION_POPUP_CONTENT,
    OPTION_PRIVACY_EXCERPT,
    OPTION_REQUESTS,
)

DEFAULT_OPTIONS = {
    OPTION_BANNER_CONTENT: (
        'We use cookies to make this site work and to understand how it is used. '
        'You can change your cookie preferences at any time.'
    ),
    OPTION_PRIVACY_EXCERPT: (
        'Cookies are small text files stored on your device. Choose which '
        'categories you allow below.'
    ),
    OPTION_POPUP_CONTENT: {
        'strictly-necessary': {
            'name': 'Strictly necessary',
            'always_active': 'on',
            'how_we_use': '<p>These cookies are required for the site to function and cannot be switched off.</p>',
            'cookies_used': 'sessionid, csrftoken',
            'hosts': {},
        },
    },
}


class Command(BaseCommand):
    help = 'Seed the GDPR cookie settings with default values'

    def add_arguments(self, parser):
        parser.add_argument(
            '--force',
            action='store_true',
            dest='force',
            help='Overwrite cookie settings that already have a value',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        force = options['force']
        existing = set(Option.objects.filter(key__in=DEFAULT_OPTIONS).values_list('key', flat=True))

        created = 0
        for key, value in DEFAULT_OPTIONS.items():
            if key in existing and not force:
                self.stdout.write(f"  Keeping existing value for {key}")
                continue

            OptionStore.set(key, value)
            created += 1
            self.stdout.write(f"  Stored default for {key}")

        if not Option.objects.filter(key=OPTION_REQUESTS).exists():
            OptionStore.set(OPTION_REQUESTS, [])
            self.stdout.write(f"  Created empty {OPTION_REQUESTS}")

        self.stdout.write(
            self.style.SUCCESS(f"GDPR defaults ready ({created} options written)")
        )
