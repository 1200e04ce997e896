"""
Management command to seed the default product categories and hardware part categories
"""
from django.core.management.base import BaseCommand
from django.db.models import ProtectedError

from sgtmake.catalog.models import Category
from sgtmake.hardware.models import PartCategory


PRODUCT_CATEGORIES = {
    'Batteries': ['Lithium-ion Cells', 'LiFePO4 Cells', 'Battery Packs', 'BMS Boards'],
    'Electronics': ['Development Boards', 'Sensors', 'Motor Drivers', 'Power Modules'],
    'Chargers': ['Li-ion Chargers', 'Lead Acid Chargers'],
    'Tools': ['Spot Welders', 'Soldering', 'Crimping Tools'],
    'Accessories': ['Nickel Strips', 'Insulation', 'Cell Holders'],
}

PART_CATEGORIES = {
    'fastener': ['Screws', 'Nuts', 'Washers', 'Standoffs'],
    'connector': ['XT Connectors', 'Anderson Connectors', 'JST Connectors', 'Ring Terminals'],
    'wire': ['Silicone Wire', 'PVC Wire', 'Multicore Cable'],
}


class Command(BaseCommand):
    help = "Adds default product categories and fastener/connector/wire categories to the database"

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Clear existing categories before adding the defaults',
        )

    def handle(self, *args, **options):
        clear = options['clear']

        self.stdout.write(self.style.SUCCESS("=" * 80))
        self.stdout.write(self.style.SUCCESS("SEEDING CATALOG CATEGORIES"))
        self.stdout.write(self.style.SUCCESS("=" * 80))

        if clear:
            self.clear_categories()

        created_count = 0
        skipped_count = 0

        for parent_name, children in PRODUCT_CATEGORIES.items():
            parent, created = Category.objects.get_or_create(
                name=parent_name, parent=None, defaults={'is_deleted': False}
            )
            created_count, skipped_count = self.report(created, parent_name, created_count, skipped_count)
            for child_name in children:
                _child, created = Category.objects.get_or_create(
                    name=child_name, parent=parent, defaults={'is_deleted': False}
                )
                created_count, skipped_count = self.report(
                    created, f"{parent_name} / {child_name}", created_count, skipped_count
                )

        for kind, names in PART_CATEGORIES.items():
            for name in names:
                _category, created = PartCategory.objects.get_or_create(
                    kind=kind, name=name, defaults={'is_active': True}
                )
                created_count, skipped_count = self.report(created, f"[{kind}] {name}", created_count, skipped_count)

        self.stdout.write(self.style.SUCCESS("\n" + "=" * 80))
        self.stdout.write(self.style.SUCCESS("SUMMARY"))
        self.stdout.write(self.style.SUCCESS("=" * 80))
        self.stdout.write(f"Categories Created: {created_count}")
        self.stdout.write(f"Categories Skipped (already exist): {skipped_count}")
        self.stdout.write(f"Product Categories in Database: {Category.objects.count()}")
        self.stdout.write(f"Part Categories in Database: {PartCategory.objects.count()}")
        self.stdout.write(self.style.SUCCESS("=" * 80))

    def report(self, created, label, created_count, skipped_count):
        if created:
            self.stdout.write(self.style.SUCCESS(f"  ✓ Created: {label}"))
            return created_count + 1, skipped_count
        self.stdout.write(self.style.WARNING(f"  ⊘ Skipped (already exists): {label}"))
        return created_count, skipped_count + 1

    def clear_categories(self):
        """Part categories go entirely; product categories still holding products are kept"""
        self.stdout.write(self.style.WARNING("Clearing existing categories..."))
        PartCategory.objects.all().delete()

        kept = 0
        # Subcategories first, parents are protected while they have children
        for has_parent in (True, False):
            for category in Category.objects.filter(parent__isnull=not has_parent):
                try:
                    category.delete()
                except ProtectedError:
                    kept += 1
        if kept:
            self.stdout.write(self.style.WARNING(f"Kept {kept} categories that still have products or subcategories."))
        self.stdout.write(self.style.SUCCESS("Categories cleared."))
