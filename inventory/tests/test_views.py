"""
Tests — Product API endpoints.

@file inventory/tests/test_views.py
"""

from decimal import Decimal

import pytest
from django.urls import reverse

from inventory.models import Product
from tests.factories import DeliveryLineFactory, ProductFactory


pytestmark = pytest.mark.django_db


class TestProductAPI:

    def test_list_requires_auth(self, api_client):
        resp = api_client.get(reverse('api-v1:inventory:product-list'))
        assert resp.status_code == 401

    def test_list_products(self, authenticated_client):
        ProductFactory.create_batch(3)
        resp = authenticated_client.get(reverse('api-v1:inventory:product-list'))
        assert resp.status_code == 200
        assert len(resp.data['results']) == 3

    def test_search_by_sku(self, authenticated_client):
        ProductFactory(sku='FIND-ME')
        ProductFactory(sku='OTHER')
        resp = authenticated_client.get(reverse('api-v1:inventory:product-list'), {'search': 'FIND'})
        assert resp.status_code == 200
        assert [p['sku'] for p in resp.data['results']] == ['FIND-ME']

    def test_filter_by_category(self, authenticated_client):
        ProductFactory(category='Fasteners')
        ProductFactory(category='Packaging')
        resp = authenticated_client.get(
            reverse('api-v1:inventory:product-list'), {'category': 'Packaging'},
        )
        assert len(resp.data['results']) == 1

    def test_regular_user_cannot_create(self, authenticated_client):
        resp = authenticated_client.post(
            reverse('api-v1:inventory:product-list'),
            {'name': 'Bolt', 'sku': 'B-1'},
            format='json',
        )
        assert resp.status_code == 403

    def test_staff_creates_with_initial_stock(self, staff_client):
        resp = staff_client.post(
            reverse('api-v1:inventory:product-list'),
            {'name': 'Bolt', 'sku': 'B-1', 'uom': 'pcs', 'initial_stock': '10', 'reorder_level': '2'},
            format='json',
        )
        assert resp.status_code == 201
        assert Decimal(resp.data['stock']) == Decimal('10')
        assert resp.data['status'] == 'ok'

    def test_negative_stock_edit_rejected(self, staff_client):
        product = ProductFactory(stock=Decimal('5'))
        resp = staff_client.patch(
            reverse('api-v1:inventory:product-detail', kwargs={'pk': product.pk}),
            {'stock': '-1'},
            format='json',
        )
        assert resp.status_code == 400
        product.refresh_from_db()
        assert product.stock == Decimal('5')

    def test_direct_stock_edit(self, staff_client):
        product = ProductFactory(stock=Decimal('5'))
        resp = staff_client.patch(
            reverse('api-v1:inventory:product-detail', kwargs={'pk': product.pk}),
            {'stock': '8'},
            format='json',
        )
        assert resp.status_code == 200
        product.refresh_from_db()
        assert product.stock == Decimal('8')

    def test_delete_referenced_product_rejected(self, staff_client):
        line = DeliveryLineFactory()
        resp = staff_client.delete(
            reverse('api-v1:inventory:product-detail', kwargs={'pk': line.product_id}),
        )
        assert resp.status_code == 400
        assert resp.data['code'] == 'BUSINESS_RULE_VIOLATION'
        assert Product.objects.filter(pk=line.product_id).exists()
