"""Serializers for authentication flows (sign up, log in)."""

from __future__ import annotations

from typing import Any

from django.contrib.auth import get_user_model  # type: ignore
from django.contrib.auth.password_validation import validate_password  # type: ignore
from django.core.exceptions import ValidationError as DjangoValidationError  # type: ignore
from django.db import transaction  # type: ignore
from rest_framework import exceptions, serializers  # type: ignore
from rest_framework.validators import UniqueValidator  # type: ignore


User = get_user_model()


class SignupSerializer(serializers.Serializer):
    firstName = serializers.CharField(source="first_name", max_length=150)
    lastName = serializers.CharField(source="last_name", max_length=150)
    email = serializers.EmailField(
        validators=[UniqueValidator(User.objects.all(), message="User with that email already exists", lookup="iexact")]
    )
    username = serializers.CharField(
        min_length=4,
        max_length=150,
        validators=[UniqueValidator(User.objects.all(), message="User with that username already exists")],
    )
    password = serializers.CharField(min_length=6, write_only=True)

    def validate_username(self, value: str) -> str:
        if "@" in value:
            raise serializers.ValidationError("Username cannot be an email.")
        return value

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        candidate = User(
            username=attrs.get("username"),
            email=attrs.get("email"),
            first_name=attrs.get("first_name"),
            last_name=attrs.get("last_name"),
        )
        try:
            validate_password(attrs["password"], user=candidate)
        except DjangoValidationError as exc:
            raise serializers.ValidationError({"password": list(exc.messages)})
        return attrs

    @transaction.atomic
    def create(self, validated_data: dict[str, Any]):  # type: ignore
        password = validated_data.pop("password")
        return User.objects.create_user(password=password, **validated_data)


class LoginSerializer(serializers.Serializer):
    credential = serializers.CharField()
    password = serializers.CharField(write_only=True)

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        credential = attrs.get("credential", "")
        password = attrs.get("password", "")

        # Username or email
        lookup = {"email__iexact": credential} if "@" in credential else {"username": credential}
        user = User.objects.filter(**lookup).first()

        if user is None or not user.is_active or not user.check_password(password):
            raise exceptions.AuthenticationFailed("Invalid credentials")

        attrs["user"] = user
        return attrs
