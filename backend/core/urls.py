"""
Core app URLs, mounted at ``/api/core/``.

GET  constants/  → SystemConstantsView
"""

from django.urls import path

from .views import SystemConstantsView

app_name = "core"

urlpatterns = [
    path("constants/", SystemConstantsView.as_view(), name="system-constants"),
]
