"""Root URL configuration for the semantic discussions site."""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path('admin/', admin.site.urls),
    path('', include('semantic_discussions.urls')),
]
