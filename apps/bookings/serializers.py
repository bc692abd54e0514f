"""Serializers for the bookings domain."""

from __future__ import annotations

from django.utils import timezone  # type: ignore
from rest_framework import serializers  # type: ignore

from apps.spots.serializers import SpotSummarySerializer
from apps.users.serializers import UserSummarySerializer

from .models import Booking
from .services import create_booking


class BookingSerializer(serializers.ModelSerializer):
    spotId = serializers.ReadOnlyField(source="spot_id")
    userId = serializers.ReadOnlyField(source="user_id")
    startDate = serializers.DateField(source="start_date", read_only=True)
    endDate = serializers.DateField(source="end_date", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Booking
        fields = ["id", "spotId", "userId", "startDate", "endDate", "createdAt", "updatedAt"]
        read_only_fields = fields


class BookingDatesSerializer(serializers.ModelSerializer):
    """What anyone but the spot owner may see of a booking."""

    spotId = serializers.ReadOnlyField(source="spot_id")
    startDate = serializers.DateField(source="start_date", read_only=True)
    endDate = serializers.DateField(source="end_date", read_only=True)

    class Meta:
        model = Booking
        fields = ["spotId", "startDate", "endDate"]
        read_only_fields = fields


class SpotOwnerBookingSerializer(BookingSerializer):
    User = UserSummarySerializer(source="user", read_only=True)

    class Meta(BookingSerializer.Meta):
        fields = ["User"] + BookingSerializer.Meta.fields
        read_only_fields = fields


class CurrentUserBookingSerializer(BookingSerializer):
    Spot = SpotSummarySerializer(source="spot", read_only=True)

    class Meta(BookingSerializer.Meta):
        fields = ["id", "spotId", "Spot", "userId", "startDate", "endDate", "createdAt", "updatedAt"]
        read_only_fields = fields


class BookingCreateSerializer(serializers.Serializer):
    """Requested dates for a new booking of the spot in context."""

    startDate = serializers.DateField(
        source="start_date",
        error_messages={
            "required": "Start date is required",
            "null": "Start date is required",
            "invalid": "Start date must be a valid date",
        },
    )
    endDate = serializers.DateField(
        source="end_date",
        error_messages={
            "required": "End date is required",
            "null": "End date is required",
            "invalid": "End date must be a valid date",
        },
    )

    def validate_startDate(self, value):  # type: ignore
        if value < timezone.localdate():
            raise serializers.ValidationError("Start date cannot be in the past")
        return value

    def validate(self, attrs):  # type: ignore
        if attrs["end_date"] <= attrs["start_date"]:
            raise serializers.ValidationError({"endDate": "End date must be after the start date"})
        return attrs

    def create(self, validated_data):  # type: ignore
        return create_booking(
            self.context["spot"],
            self.context["request"].user,
            validated_data["start_date"],
            validated_data["end_date"],
        )

    def to_representation(self, instance):  # type: ignore
        return BookingSerializer(instance, context=self.context).data
