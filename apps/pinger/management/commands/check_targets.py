from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from apps.pinger.services import TargetConfigError, load_targets


class Command(BaseCommand):
    help = 'Validate a targets file and list the targets it defines'

    def add_arguments(self, parser):
        parser.add_argument(
            'path',
            nargs='?',
            help='Path to the targets JSON file (default: PINGER_TARGETS_FILE)',
        )

    def handle(self, *args, **options):
        path = options['path'] or getattr(settings, 'PINGER_TARGETS_FILE', 'targets.json')

        try:
            targets = load_targets(path)
        except TargetConfigError as e:
            raise CommandError(e.reason)

        for target in targets:
            self.stdout.write(f'{target.url}  every {target.min_delay}-{target.max_delay} min')
        self.stdout.write(self.style.SUCCESS(f'{path}: {len(targets)} valid targets'))
