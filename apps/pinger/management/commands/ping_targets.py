"""
Management command to ping configured targets once, right now.

Usage:
    python manage.py ping_targets                          # Ping every configured target
    python manage.py ping_targets --url https://a.example  # Ping specific target(s)

Runs synchronously and doesn't start, stop or otherwise touch the ping loops.
"""

from django.core.management.base import BaseCommand, CommandError


class Command(BaseCommand):
    help = 'Ping configured targets once'

    def add_arguments(self, parser):
        parser.add_argument(
            '--url',
            action='append',
            help='Target URL(s) to ping. Can be specified multiple times. Default: all',
        )

    def handle(self, *args, **options):
        from apps.pinger.keepalive import get_scheduler
        from apps.pinger.services import NetworkFailure

        scheduler = get_scheduler()
        targets = scheduler.list_targets()

        if options['url']:
            known = {t.url: t for t in targets}
            missing = [url for url in options['url'] if url not in known]
            if missing:
                raise CommandError(f'Unknown target(s): {", ".join(missing)}')
            targets = [known[url] for url in options['url']]

        if not targets:
            self.stdout.write(self.style.WARNING('No targets configured'))
            return

        failed = 0
        for target in targets:
            self.stdout.write(f'Pinging {target.url}...')
            try:
                response = scheduler.ping_once(target)
            except NetworkFailure as e:
                failed += 1
                self.stdout.write(self.style.ERROR(f'  failed: {e.reason}'))
                continue
            self.stdout.write(self.style.SUCCESS(
                f'  {response.status_code} {response.reason_phrase}'
            ))

        self.stdout.write(f'Pinged {len(targets)} targets, {failed} failed')
