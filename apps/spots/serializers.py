"""Serializers for the spots domain."""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal

from rest_framework import serializers  # type: ignore

from apps.users.serializers import UserSummarySerializer

from .models import Spot, SpotImage
from .services import round_rating


LAT_MESSAGE = "Latitude must be within -90 and 90"
LNG_MESSAGE = "Longitude must be within -180 and 180"
PRICE_MESSAGE = "Price per day must be a positive number"
# Largest value the price column (10 digits, 2 decimal places) can store.
MAX_PRICE = 99_999_999.99
MAX_PRICE_MESSAGE = "Price per day must not exceed 99999999.99"


def _required(message: str) -> dict[str, str]:
    return {"required": message, "blank": message, "null": message}


class SpotSerializer(serializers.ModelSerializer):
    """Flat spot record returned after create and update."""

    ownerId = serializers.ReadOnlyField(source="owner_id")
    lat = serializers.FloatField(read_only=True)
    lng = serializers.FloatField(read_only=True)
    price = serializers.FloatField(read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Spot
        fields = [
            "id",
            "ownerId",
            "address",
            "city",
            "state",
            "country",
            "lat",
            "lng",
            "name",
            "description",
            "price",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = fields


class SpotListSerializer(SpotSerializer):
    """Listing entry; expects ``annotate_listing`` annotations on the instance."""

    avgRating = serializers.SerializerMethodField()
    previewImage = serializers.ReadOnlyField(source="preview_image")

    class Meta(SpotSerializer.Meta):
        fields = SpotSerializer.Meta.fields + ["avgRating", "previewImage"]
        read_only_fields = fields

    def get_avgRating(self, obj: Spot) -> float | None:
        return round_rating(getattr(obj, "avg_rating", None))


class SpotSummarySerializer(serializers.ModelSerializer):
    """``Spot`` block nested in the current user's bookings and reviews."""

    ownerId = serializers.ReadOnlyField(source="owner_id")
    lat = serializers.FloatField(read_only=True)
    lng = serializers.FloatField(read_only=True)
    price = serializers.FloatField(read_only=True)
    previewImage = serializers.SerializerMethodField()

    class Meta:
        model = Spot
        fields = [
            "id",
            "ownerId",
            "address",
            "city",
            "state",
            "country",
            "lat",
            "lng",
            "name",
            "price",
            "previewImage",
        ]
        read_only_fields = fields

    def get_previewImage(self, obj: Spot) -> str | None:
        # reads the prefetched image set
        for image in obj.images.all():
            if image.preview:
                return image.url
        return None


class SpotImageSerializer(serializers.ModelSerializer):
    class Meta:
        model = SpotImage
        fields = ["id", "url", "preview"]
        read_only_fields = fields


class SpotDetailSerializer(SpotSerializer):
    numReviews = serializers.IntegerField(source="num_reviews", read_only=True)
    avgStarRating = serializers.SerializerMethodField()
    SpotImages = SpotImageSerializer(source="images", many=True, read_only=True)
    Owner = UserSummarySerializer(source="owner", read_only=True)

    class Meta(SpotSerializer.Meta):
        fields = SpotSerializer.Meta.fields + ["numReviews", "avgStarRating", "SpotImages", "Owner"]
        read_only_fields = fields

    def get_avgStarRating(self, obj: Spot) -> float | None:
        return round_rating(getattr(obj, "avg_rating", None))


class SpotWriteSerializer(serializers.ModelSerializer):
    """Create/update payload with the API's field-level messages."""

    lat = serializers.FloatField(
        min_value=-90,
        max_value=90,
        error_messages={
            **_required("Latitude is required"),
            "invalid": LAT_MESSAGE,
            "min_value": LAT_MESSAGE,
            "max_value": LAT_MESSAGE,
        },
    )
    lng = serializers.FloatField(
        min_value=-180,
        max_value=180,
        error_messages={
            **_required("Longitude is required"),
            "invalid": LNG_MESSAGE,
            "min_value": LNG_MESSAGE,
            "max_value": LNG_MESSAGE,
        },
    )
    price = serializers.FloatField(
        max_value=MAX_PRICE,
        error_messages={
            **_required(PRICE_MESSAGE),
            "invalid": PRICE_MESSAGE,
            "max_value": MAX_PRICE_MESSAGE,
        },
    )

    class Meta:
        model = Spot
        fields = ["address", "city", "state", "country", "lat", "lng", "name", "description", "price"]
        extra_kwargs = {
            "address": {"error_messages": _required("Street address is required")},
            "city": {"error_messages": _required("City is required")},
            "state": {"error_messages": _required("State is required")},
            "country": {"error_messages": _required("Country is required")},
            "name": {
                "error_messages": {
                    **_required("Name is required"),
                    "max_length": "Name must be less than 50 characters",
                }
            },
            "description": {"error_messages": _required("Description is required")},
        }

    def validate_lat(self, value: float) -> Decimal:
        return _quantize(value, "0.000001", LAT_MESSAGE)

    def validate_lng(self, value: float) -> Decimal:
        return _quantize(value, "0.000001", LNG_MESSAGE)

    def validate_price(self, value: float) -> Decimal:
        price = _quantize(value, "0.01", PRICE_MESSAGE)
        if price <= 0:
            raise serializers.ValidationError(PRICE_MESSAGE)
        return price

    def to_representation(self, instance: Spot):  # type: ignore
        return SpotSerializer(instance, context=self.context).data


def _quantize(value: float, step: str, message: str) -> Decimal:
    if not math.isfinite(value):
        raise serializers.ValidationError(message)
    return Decimal(str(value)).quantize(Decimal(step), rounding=ROUND_HALF_UP)


class SpotImageInputSerializer(serializers.Serializer):
    url = serializers.URLField(
        max_length=500,
        error_messages={
            **_required("Image URL is required"),
            "invalid": "Each image URL must be valid",
        },
    )
    preview = serializers.BooleanField(default=False)


class SpotImagesReplaceSerializer(serializers.Serializer):
    """Body of the bulk replace: ``{"images": [{"url": ..., "preview": ...}]}``."""

    images = SpotImageInputSerializer(many=True)

    def validate_images(self, value: list[dict]) -> list[dict]:
        if not value:
            raise serializers.ValidationError("At least one image is required")
        if sum(1 for image in value if image.get("preview")) > 1:
            raise serializers.ValidationError("Only one image can be the preview image")
        return value
