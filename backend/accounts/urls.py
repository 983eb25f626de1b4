"""
Accounts URLs, mounted at ``/api/accounts/``.

POST   auth/register/           RegisterView (public, creates a citizen)
POST   auth/login/              LoginView (username / email / phone)
POST   auth/token/refresh/      SimpleJWT refresh
GET    me/                      MeView
PATCH  me/                      MeView
GET    users/                   UserViewSet.list         (admin)
GET    users/{id}/              UserViewSet.retrieve     (admin)
PATCH  users/{id}/assign-role/  UserViewSet.assign_role  (admin)
GET    workers/                 WorkerListView           (supervisor, admin)
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import TokenRefreshView

from .views import LoginView, MeView, RegisterView, UserViewSet, WorkerListView

app_name = "accounts"

router = DefaultRouter()
router.register(r"users", UserViewSet, basename="user")

urlpatterns = [
    path("auth/register/", RegisterView.as_view(), name="register"),
    path("auth/login/", LoginView.as_view(), name="login"),
    path("auth/token/refresh/", TokenRefreshView.as_view(), name="token-refresh"),
    path("me/", MeView.as_view(), name="me"),
    path("workers/", WorkerListView.as_view(), name="worker-list"),
    path("", include(router.urls)),
]
