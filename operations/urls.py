"""
Operations — URL Configuration

@file operations/urls.py
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import DeliveryViewSet, ReceiptViewSet

app_name = 'operations'

router = DefaultRouter()
router.register('receipts', ReceiptViewSet, basename='receipt')
router.register('deliveries', DeliveryViewSet, basename='delivery')

urlpatterns = [
    path('', include(router.urls)),
]
