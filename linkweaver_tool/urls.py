"""Root URL configuration for linkweaver_tool."""

from django.urls import include, path

urlpatterns = [
    path('', include('linkweaver.urls')),
]
