# apps/core/management/commands/clear_rate_limits.py
"""
Clear rate limit counters

Usage:
    python manage.py clear_rate_limits --identifier user:42
    python manage.py clear_rate_limits
"""
from django.conf import settings
from django.core.cache import cache
from django.core.management.base import BaseCommand

from apps.infrastructure.rate_limit import get_rate_limit_config, parse_rate


class Command(BaseCommand):
    help = "Clear rate limit counters for one identifier or the whole cache"

    def add_arguments(self, parser):
        parser.add_argument(
            "--identifier",
            type=str,
            help="Identifier to reset, e.g. 'ip:192.168.1.1' or 'user:123'",
        )

    def handle(self, *args, **options):
        identifier = options.get("identifier")

        if identifier:
            self._clear_identifier(identifier)
        else:
            self._clear_all()

    def _clear_identifier(self, identifier):
        config = get_rate_limit_config(settings.ENVIRONMENT)
        periods = {
            parse_rate(value)[1]
            for key, value in config.items()
            if key.endswith("_rate")
        }

        cleared = sum(
            1 for period in sorted(periods)
            if cache.delete(f"rate_limit:{identifier}:{period}")
        )

        self.stdout.write(
            self.style.SUCCESS(f"Cleared {cleared} rate limits for {identifier}")
        )

    def _clear_all(self):
        # No pattern delete in Django's cache API; this also drops cached tags
        cache.clear()
        self.stdout.write(
            self.style.SUCCESS("Cleared all cache entries (including rate limits)")
        )
        self.stdout.write(
            self.style.WARNING(
                "Cached tag listings were cleared too. "
                "Use --identifier to reset a single caller."
            )
        )
