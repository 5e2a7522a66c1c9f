"""
URL configuration for the wellness clinic backend.

The API routes come first so ``admin/users`` and ``admin/stats`` are served
by the API rather than the Django admin site, which lives under
``django-admin/``.  OpenAPI documentation is exposed at ``/swagger/`` and
``/redoc/``.
"""
from django.contrib import admin
from django.urls import include, path

from drf_yasg import openapi
from drf_yasg.views import get_schema_view
from rest_framework import permissions

# API metadata for Swagger/OpenAPI documentation
api_info = openapi.Info(
    title="Wellness Clinic API",
    default_version='v1',
    description="Accounts, appointments, patient records and reporting for the wellness clinic dashboard.",
)

schema_view = get_schema_view(
    api_info,
    public=True,
    permission_classes=(permissions.AllowAny,),
)

urlpatterns = [
    path('', include('clinic.routers')),
    path('django-admin/', admin.site.urls),
    path('swagger/', schema_view.with_ui('swagger', cache_timeout=0), name='schema-swagger-ui'),
    path('redoc/', schema_view.with_ui('redoc', cache_timeout=0), name='schema-redoc'),
]
