"""
URL configuration for the GDPR admin pages.
"""

from django.urls import path

from . import views

app_name = 'privacy'

urlpatterns = [
    path('settings/', views.settings_page, name='settings'),
    path('requests/', views.requests_page, name='requests'),

    # Erasure queue actions (POST only)
    path('requests/delete/add/', views.add_to_deletion_requests, name='add_to_deletion_requests'),
    path('requests/delete/remove/', views.remove_from_deletion_requests, name='remove_from_deletion_requests'),
    path('requests/delete/process/', views.process_user_deletion, name='process_user_deletion'),
]
