"""
URL configuration for the clinic back-office project.

Routes the Django admin, the REST API of the ``backoffice`` app and the
OpenAPI documentation exposed at ``/swagger/`` and ``/redoc/``.
"""
from django.contrib import admin
from django.urls import path, include

from rest_framework import permissions
from drf_yasg.views import get_schema_view
from drf_yasg import openapi

api_info = openapi.Info(
    title="Clinic Back-Office API",
    default_version='v1',
    description="Patients, doctors, treatments, payroll, vouchers and field-trip sales for the clinic.",
)

schema_view = get_schema_view(
    api_info,
    public=True,
    permission_classes=(permissions.AllowAny,),
)

urlpatterns = [
    path('admin/', admin.site.urls),
    path('', include('backoffice.routers')),
    path('', include('django_prometheus.urls')),
    path('swagger/', schema_view.with_ui('swagger', cache_timeout=0), name='schema-swagger-ui'),
    path('redoc/', schema_view.with_ui('redoc', cache_timeout=0), name='schema-redoc'),
]
