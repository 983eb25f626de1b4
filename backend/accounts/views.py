"""
Accounts app views.

All views follow the **Thin View** pattern: validate input via
serializers, delegate to the service layer, and return the result
wrapped in a DRF ``Response``.

View Map
--------
- ``RegisterView``    — POST /auth/register/
- ``LoginView``       — POST /auth/login/
- ``MeView``          — GET / PATCH /me/
- ``UserViewSet``     — /users/  (list, retrieve, assign-role)
- ``WorkerListView``  — GET /workers/
"""

from __future__ import annotations

from drf_spectacular.utils import (
    OpenApiResponse,
    extend_schema,
)
from rest_framework import generics, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import (
    AssignRoleSerializer,
    CustomTokenObtainPairSerializer,
    MeUpdateSerializer,
    RegisterRequestSerializer,
    UserDetailSerializer,
    UserFilterSerializer,
    UserListSerializer,
    WorkerSerializer,
)
from .services import (
    CurrentUserService,
    UserManagementService,
    UserRegistrationService,
)


# ═══════════════════════════════════════════════════════════════════
#  Authentication Views
# ═══════════════════════════════════════════════════════════════════


class RegisterView(generics.CreateAPIView):
    """
    POST /api/accounts/auth/register/

    Public endpoint.  Creates a new user with the default "Citizen" role.
    """

    permission_classes = [AllowAny]
    serializer_class = RegisterRequestSerializer

    @extend_schema(
        summary="Register a citizen account",
        responses={
            201: OpenApiResponse(response=UserDetailSerializer, description="User created."),
            400: OpenApiResponse(description="Validation error."),
            409: OpenApiResponse(description="Username, email or phone already taken."),
        },
        tags=["Accounts"],
    )
    def create(self, request: Request, *args, **kwargs) -> Response:
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = UserRegistrationService.register_user(dict(serializer.validated_data))
        response_serializer = UserDetailSerializer(user)
        return Response(response_serializer.data, status=status.HTTP_201_CREATED)


class LoginView(APIView):
    """
    POST /api/accounts/auth/login/

    Public endpoint.  Authenticates via username, email or phone number
    plus password and returns a JWT pair with the user profile.
    """

    permission_classes = [AllowAny]

    @extend_schema(
        summary="Log in",
        request=CustomTokenObtainPairSerializer,
        responses={
            200: OpenApiResponse(description="Access/refresh tokens and the user profile."),
            400: OpenApiResponse(description="Invalid credentials."),
        },
        tags=["Accounts"],
    )
    def post(self, request: Request) -> Response:
        serializer = CustomTokenObtainPairSerializer(
            data=request.data,
            context={"request": request},
        )
        serializer.is_valid(raise_exception=True)

        payload = dict(serializer.validated_data)
        payload["user"] = UserDetailSerializer(serializer.user).data

        return Response(payload, status=status.HTTP_200_OK)


# ═══════════════════════════════════════════════════════════════════
#  Current User ("Me") View
# ═══════════════════════════════════════════════════════════════════


class MeView(APIView):
    """
    GET  /api/accounts/me/  → Retrieve current user profile.
    PATCH /api/accounts/me/ → Update own profile fields.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Current user profile",
        responses={200: UserDetailSerializer},
        tags=["Accounts"],
    )
    def get(self, request: Request) -> Response:
        user = CurrentUserService.get_profile(request.user)
        return Response(UserDetailSerializer(user).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Update current user profile",
        request=MeUpdateSerializer,
        responses={200: UserDetailSerializer},
        tags=["Accounts"],
    )
    def patch(self, request: Request) -> Response:
        serializer = MeUpdateSerializer(
            instance=request.user, data=request.data, partial=True,
        )
        serializer.is_valid(raise_exception=True)
        user = CurrentUserService.update_profile(
            request.user, serializer.validated_data,
        )
        return Response(UserDetailSerializer(user).data, status=status.HTTP_200_OK)


# ═══════════════════════════════════════════════════════════════════
#  User Management ViewSet
# ═══════════════════════════════════════════════════════════════════


class UserViewSet(viewsets.ViewSet):
    """
    /api/accounts/users/

    Administrative user management.  Authorization is enforced by
    ``UserManagementService``.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="List users",
        parameters=[UserFilterSerializer],
        responses={
            200: OpenApiResponse(response=UserListSerializer(many=True), description="Users."),
            403: OpenApiResponse(description="Administrators only."),
        },
        tags=["Accounts"],
    )
    def list(self, request: Request) -> Response:
        filters = UserFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        qs = UserManagementService.list_users(request.user, filters.validated_data)
        return Response(UserListSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Retrieve a user",
        responses={200: UserDetailSerializer, 404: OpenApiResponse(description="User not found.")},
        tags=["Accounts"],
    )
    def retrieve(self, request: Request, pk: str = None) -> Response:
        user = UserManagementService.get_user(request.user, pk)
        return Response(UserDetailSerializer(user).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Assign a role",
        request=AssignRoleSerializer,
        responses={
            200: OpenApiResponse(response=UserDetailSerializer, description="Role assigned."),
            403: OpenApiResponse(description="Administrators only."),
            404: OpenApiResponse(description="User or role not found."),
        },
        tags=["Accounts"],
    )
    @action(detail=True, methods=["patch"], url_path="assign-role")
    def assign_role(self, request: Request, pk: str = None) -> Response:
        serializer = AssignRoleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = UserManagementService.assign_role(
            user_id=pk,
            role_id=serializer.validated_data["role_id"],
            performed_by=request.user,
        )
        return Response(UserDetailSerializer(user).data, status=status.HTTP_200_OK)


class WorkerListView(APIView):
    """
    GET /api/accounts/workers/

    Directory of users that can be assigned as field workers.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="List assignable workers",
        responses={
            200: OpenApiResponse(response=WorkerSerializer(many=True), description="Workers."),
            403: OpenApiResponse(description="Supervisors and administrators only."),
        },
        tags=["Accounts"],
    )
    def get(self, request: Request) -> Response:
        workers = UserManagementService.list_workers(request.user)
        return Response(WorkerSerializer(workers, many=True).data, status=status.HTTP_200_OK)
