"""
StockFlow — Root URL Configuration

All API endpoints are namespaced under /api/v1/.
The DRF browsable API is available for route inspection in development.

@file config/urls.py
"""

from django.contrib import admin
from django.urls import include, path
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.reverse import reverse
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

admin.site.site_header = 'StockFlow Administration'
admin.site.site_title = 'StockFlow'
admin.site.index_title = 'Warehouse Inventory'


@api_view(['GET'])
@permission_classes([AllowAny])
def api_root(request, format=None):
    """StockFlow API v1 — endpoint directory."""
    return Response({
        'auth': {
            'token': reverse('api-v1:auth:token', request=request, format=format),
            'refresh': reverse('api-v1:auth:token-refresh', request=request, format=format),
        },
        'inventory': {
            'products': reverse('api-v1:inventory:product-list', request=request, format=format),
        },
        'operations': {
            'receipts': reverse('api-v1:operations:receipt-list', request=request, format=format),
            'deliveries': reverse('api-v1:operations:delivery-list', request=request, format=format),
        },
    })


auth_patterns = [
    path('token/', TokenObtainPairView.as_view(), name='token'),
    path('token/refresh/', TokenRefreshView.as_view(), name='token-refresh'),
]

api_v1_patterns = [
    path('', api_root, name='api-root'),
    path('auth/', include((auth_patterns, 'auth'))),
    path('inventory/', include('inventory.urls', namespace='inventory')),
    path('operations/', include('operations.urls', namespace='operations')),
]

urlpatterns = [
    path('admin/', admin.site.urls),

    # DRF session auth (powers the "Log in" button on the browsable API)
    path('api/auth/', include('rest_framework.urls', namespace='rest_framework')),

    # Versioned API
    path('api/v1/', include((api_v1_patterns, 'api-v1'))),
]
