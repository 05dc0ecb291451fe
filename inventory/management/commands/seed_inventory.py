"""
Inventory — Management Command: seed_inventory

Loads a small demo product catalogue, or a catalogue from a local JSON
file shaped as a list of product objects.

Usage::

    python manage.py seed_inventory
    python manage.py seed_inventory --file products.json

Idempotent: safe to re-run (uses get_or_create on SKU).

@file inventory/management/commands/seed_inventory.py
"""

import json
import logging
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from inventory.models import Product

logger = logging.getLogger('stockflow')

DEMO_PRODUCTS = [
    {'sku': 'STL-ROD-10', 'name': 'Steel rod 10mm', 'category': 'Raw materials', 'uom': 'kg',
     'stock': '250', 'reorder_level': '50'},
    {'sku': 'BLT-M8', 'name': 'Hex bolt M8', 'category': 'Fasteners', 'uom': 'pcs',
     'stock': '1200', 'reorder_level': '200'},
    {'sku': 'PLT-EUR', 'name': 'Euro pallet', 'category': 'Packaging', 'uom': 'pcs',
     'stock': '40', 'reorder_level': '10'},
    {'sku': 'OIL-HYD', 'name': 'Hydraulic oil', 'category': 'Consumables', 'uom': 'l',
     'stock': '0', 'reorder_level': '20'},
]


class Command(BaseCommand):
    help = 'Seed the product catalogue with demo data.'

    def add_arguments(self, parser):
        parser.add_argument(
            '--file',
            type=str,
            help='Path to a local JSON file (overrides the built-in demo catalogue).',
        )

    def handle(self, *args, **options):
        if options.get('file'):
            with open(options['file'], 'r', encoding='utf-8') as f:
                rows = json.load(f)
        else:
            rows = DEMO_PRODUCTS

        created = 0
        with transaction.atomic():
            for row in rows:
                _, was_created = Product.objects.get_or_create(
                    sku=row['sku'],
                    defaults={
                        'name': row['name'],
                        'category': row.get('category', ''),
                        'uom': row.get('uom', 'pcs'),
                        'stock': Decimal(str(row.get('stock', 0))),
                        'reorder_level': Decimal(str(row.get('reorder_level', 0))),
                    },
                )
                created += was_created

        logger.info('seed_inventory: %s product(s) created, %s already present.', created, len(rows) - created)
        self.stdout.write(self.style.SUCCESS(
            f'Done. Created: {created}, already present: {len(rows) - created}'
        ))
