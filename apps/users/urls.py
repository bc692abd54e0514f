"""URL declarations for the users app (sign up and session)."""

from __future__ import annotations

from django.urls import path  # type: ignore
from rest_framework_simplejwt.views import TokenRefreshView  # type: ignore

from .auth_views import SessionView, SignupView

urlpatterns = [
    path("users/", SignupView.as_view(), name="signup"),
    path("session/", SessionView.as_view(), name="session"),
    path("session/refresh/", TokenRefreshView.as_view(), name="token-refresh"),
]
