"""Serializers for authentication flows (signup, login)."""

from __future__ import annotations

from typing import Any

from django.contrib.auth import get_user_model  # type: ignore
from django.contrib.auth.password_validation import validate_password  # type: ignore
from django.core.exceptions import ValidationError as DjangoValidationError  # type: ignore
from django.db import transaction  # type: ignore
from rest_framework import serializers  # type: ignore

User = get_user_model()


class SignupSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(min_length=8, write_only=True)
    full_name = serializers.CharField(max_length=150, required=False, allow_blank=True)

    def validate_email(self, value: str) -> str:
        email = value.strip().lower()
        if User.objects.filter(email__iexact=email).exists():
            raise serializers.ValidationError("An account with this email already exists.")
        return email

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        candidate = User(username=attrs["email"], email=attrs["email"])
        try:
            validate_password(attrs["password"], user=candidate)
        except DjangoValidationError as exc:
            raise serializers.ValidationError({"password": list(exc.messages)})
        return attrs

    @transaction.atomic
    def create(self, validated_data: dict[str, Any]):  # type: ignore
        first_name, _, last_name = validated_data.get("full_name", "").strip().partition(" ")
        return User.objects.create_user(
            username=validated_data["email"],
            email=validated_data["email"],
            password=validated_data["password"],
            first_name=first_name,
            last_name=last_name.strip(),
        )


class LoginSerializer(serializers.Serializer):
    """Accepts the account email (or username) as ``login`` or ``email``."""

    login = serializers.CharField(required=False)
    email = serializers.CharField(required=False)
    password = serializers.CharField(write_only=True)

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        login = (attrs.get("login") or attrs.get("email") or "").strip()
        if not login:
            raise serializers.ValidationError({"login": "This field is required."})

        user = (
            User.objects.filter(email__iexact=login).first()
            if "@" in login
            else User.objects.filter(username=login).first()
        )
        if user is None or not user.is_active or not user.check_password(attrs["password"]):
            raise serializers.ValidationError({"login": "Invalid login or password."})

        attrs["user"] = user
        return attrs
