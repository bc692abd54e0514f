"""Serializers for reviews.

Read serializers embed the reviewer, the review images and, for the current
user's listing, a summary of the spot. The write serializer carries the
API's validation messages; the reviewer and spot come from the view.
"""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.spots.serializers import SpotSummarySerializer
from apps.users.serializers import UserSummarySerializer

from .models import Review, ReviewImage


class ReviewImageSerializer(serializers.ModelSerializer):
    class Meta:
        model = ReviewImage
        fields = ["id", "url"]
        read_only_fields = ["id"]
        extra_kwargs = {
            "url": {
                "error_messages": {
                    "required": "Image URL is required",
                    "blank": "Image URL is required",
                    "invalid": "Image URL must be valid",
                }
            }
        }


class ReviewSerializer(serializers.ModelSerializer):
    userId = serializers.ReadOnlyField(source="user_id")
    spotId = serializers.ReadOnlyField(source="spot_id")
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Review
        fields = ["id", "userId", "spotId", "review", "stars", "createdAt", "updatedAt"]
        read_only_fields = fields


class SpotReviewSerializer(ReviewSerializer):
    User = UserSummarySerializer(source="user", read_only=True)
    ReviewImages = ReviewImageSerializer(source="images", many=True, read_only=True)

    class Meta(ReviewSerializer.Meta):
        fields = ReviewSerializer.Meta.fields + ["User", "ReviewImages"]
        read_only_fields = fields


class CurrentUserReviewSerializer(SpotReviewSerializer):
    Spot = SpotSummarySerializer(source="spot", read_only=True)

    class Meta(SpotReviewSerializer.Meta):
        fields = ReviewSerializer.Meta.fields + ["User", "Spot", "ReviewImages"]
        read_only_fields = fields


class ReviewWriteSerializer(serializers.ModelSerializer):
    """Payload for creating and editing a review."""

    review = serializers.CharField(
        max_length=4000,
        error_messages={
            "required": "Review text is required",
            "blank": "Review text is required",
            "null": "Review text is required",
            "invalid": "Review must be a string",
            "max_length": "Review must not exceed the length of a verified user's tweet",
        },
    )
    stars = serializers.IntegerField(
        min_value=1,
        max_value=5,
        error_messages={
            "required": "Stars rating is required",
            "null": "Stars rating is required",
            "invalid": "Stars must be an integer between 1 and 5",
            "min_value": "Stars must be an integer between 1 and 5",
            "max_value": "Stars must be an integer between 1 and 5",
        },
    )

    class Meta:
        model = Review
        fields = ["review", "stars"]

    def to_representation(self, instance: Review):  # type: ignore
        return ReviewSerializer(instance, context=self.context).data
