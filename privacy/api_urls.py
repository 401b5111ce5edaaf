"""
URL configuration for the GDPR admin API.
"""

from django.urls import path

from . import api_views

app_name = 'privacy-api'

urlpatterns = [
    path('requests/', api_views.RequestQueueView.as_view(), name='requests'),
    path('cookie-settings/', api_views.CookieSettingsView.as_view(), name='cookie_settings'),
]
