"""
URL configuration for gdpr_admin project.

The GDPR admin pages live under /admin/gdpr/ next to the Django admin,
the staff JSON API under /api/v1/gdpr/.
"""
from django.contrib import admin
from django.urls import path, include
from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularRedocView,
)

urlpatterns = [
    # GDPR admin pages (must precede the admin catch-all)
    path('admin/gdpr/', include('privacy.urls')),

    # Admin
    path('admin/', admin.site.urls),

    # API Documentation
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/redoc/', SpectacularRedocView.as_view(url_name='schema'), name='redoc'),

    # API Routes
    path('api/v1/gdpr/', include('privacy.api_urls')),
]
