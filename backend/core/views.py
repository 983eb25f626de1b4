"""Core app views."""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import SystemConstantsSerializer
from .services import SystemConstantsService


class SystemConstantsView(APIView):
    """
    GET /api/core/constants/

    Public.  Statuses, priorities, departments, the category routing
    table, history kinds and the role hierarchy, so the mobile app and
    the dashboard never hardcode them.
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(summary="System constants", responses={200: SystemConstantsSerializer}, tags=["System"])
    def get(self, request: Request) -> Response:
        return Response(SystemConstantsSerializer(SystemConstantsService.get_constants()).data)
