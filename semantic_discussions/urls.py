"""URL configuration for the semantic discussions app."""

from django.urls import path

from . import views

app_name = 'semantic_discussions'

urlpatterns = [
    path('api/', views.api, name='api'),
    path('account/signup/', views.signup, name='signup'),
]
