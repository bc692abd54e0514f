"""API views for managing reviews."""

from __future__ import annotations

import logging

from django.http import Http404  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.core.exceptions import NotFoundError
from apps.spots.views import SpotScopedMixin

from .models import Review
from .serializers import (
    CurrentUserReviewSerializer,
    ReviewImageSerializer,
    ReviewWriteSerializer,
    SpotReviewSerializer,
)
from .services import add_review_image, create_review

logger = logging.getLogger(__name__)


class IsReviewer(permissions.BasePermission):
    """Only the author may change a review."""

    message = "Review must belong to the current user"

    def has_object_permission(self, request, view, obj: Review) -> bool:  # type: ignore
        return obj.user_id == request.user.id


class SpotReviewViewSet(SpotScopedMixin, viewsets.GenericViewSet):
    """Reviews of the spot in the URL; anyone can read them."""

    permission_classes = [permissions.IsAuthenticatedOrReadOnly]
    queryset = Review.objects.select_related("user").prefetch_related("images")
    serializer_class = ReviewWriteSerializer

    def get_queryset(self):  # type: ignore
        return super().get_queryset().filter(spot=self.get_spot())

    def list(self, request, spot_id=None):  # type: ignore
        data = SpotReviewSerializer(self.get_queryset(), many=True).data
        return Response({"Reviews": data})

    def create(self, request, spot_id=None):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        review = create_review(self.get_spot(), request.user, **serializer.validated_data)
        return Response(serializer.to_representation(review), status=status.HTTP_201_CREATED)


class ReviewViewSet(mixins.UpdateModelMixin, mixins.DestroyModelMixin, viewsets.GenericViewSet):
    """The current user's reviews: list, edit, delete and attach images."""

    queryset = Review.objects.select_related("user", "spot").prefetch_related("images", "spot__images")
    permission_classes = [permissions.IsAuthenticated, IsReviewer]
    lookup_value_regex = r"\d+"
    http_method_names = ["get", "post", "put", "delete", "head", "options"]

    def get_serializer_class(self):  # type: ignore
        if self.action == "update":
            return ReviewWriteSerializer
        if self.action == "images":
            return ReviewImageSerializer
        return CurrentUserReviewSerializer

    def get_object(self):  # type: ignore
        try:
            return super().get_object()
        except Http404:
            raise NotFoundError("Review couldn't be found")

    @action(detail=False, methods=["get"])
    def current(self, request):  # type: ignore
        reviews = self.get_queryset().filter(user=request.user)
        return Response({"Reviews": self.get_serializer(reviews, many=True).data})

    @action(detail=True, methods=["post"])
    def images(self, request, pk=None):  # type: ignore
        review = self.get_object()
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        image = add_review_image(review, url=serializer.validated_data["url"])
        return Response(ReviewImageSerializer(image).data, status=status.HTTP_201_CREATED)

    def perform_update(self, serializer):  # type: ignore
        review = serializer.save()
        logger.info(f"Review {review.pk} updated by user {self.request.user.pk}")

    def destroy(self, request, *args, **kwargs):  # type: ignore
        review = self.get_object()
        review_id = review.pk
        review.delete()
        logger.info(f"Review {review_id} deleted by user {request.user.pk}")
        return Response({"message": "Successfully deleted"}, status=status.HTTP_200_OK)
