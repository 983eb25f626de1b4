"""
Project URL map.

/admin/            Django admin (report triage, departments, users)
/api/accounts/     registration, login, profile, user and worker directories
/api/core/         public constants
/api/reports/      report submission, listing, workflow and stats
/api/departments/  department directory and category routing
/api/schema/       OpenAPI document, browsable at /api/docs/
"""
from django.contrib import admin
from django.urls import include, path

from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/accounts/', include('accounts.urls')),
    path('api/core/', include('core.urls')),
    path('api/', include('reports.urls')),
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
]
