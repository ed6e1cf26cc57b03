from django.urls import path

from .views import site_page

urlpatterns = [
    path('<slug:subdomain>/', site_page, name='site-home'),
    path('<slug:subdomain>/<path:slug>/', site_page, name='site-page'),
]
