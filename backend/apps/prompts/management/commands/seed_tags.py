# apps/prompts/management/commands/seed_tags.py
"""
Seed the default tag set

Usage:
    python manage.py seed_tags
    python manage.py seed_tags --list
"""
from django.core.management.base import BaseCommand
from django.db import transaction

from apps.domain.services.tag_service import DEFAULT_TAGS
from apps.infrastructure.container import create_tag_service


class Command(BaseCommand):
    help = "Create or update the default tags (safe to run repeatedly)"

    def add_arguments(self, parser):
        parser.add_argument(
            "--list",
            action="store_true",
            help="Print the default tags without writing anything",
        )

    def handle(self, *args, **options):
        if options["list"]:
            for name, description in DEFAULT_TAGS:
                self.stdout.write(f"{name}: {description}")
            return

        self.stdout.write(f"Seeding {len(DEFAULT_TAGS)} default tags...")

        with transaction.atomic():
            created, updated = create_tag_service().seed_default_tags()

        self.stdout.write(
            self.style.SUCCESS(f"Seeded tags: {created} created, {updated} updated")
        )
