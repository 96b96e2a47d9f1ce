"""URL configuration for the linkweaver app.

This module defines the URL patterns for the app's views. It also
specifies the ``app_name`` to allow namespacing from the project URL
configuration.
"""

from django.urls import path

from . import views

app_name = 'linkweaver'

urlpatterns = [
    path('inject/', views.inject, name='inject'),
    path('anchors/validate/', views.anchor_validation, name='anchor_validation'),
]
