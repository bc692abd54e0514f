"""Spot API views."""

from __future__ import annotations

import logging

from django.core.exceptions import ValidationError as DjangoValidationError  # type: ignore
from django.db.models import Avg, Count  # type: ignore
from django.http import Http404  # type: ignore
from django_filters.utils import translate_validation  # type: ignore
from rest_framework import permissions, serializers, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.core.exceptions import NotFoundError

from .filters import SpotFilterSet
from .models import Spot
from .serializers import (
    SpotDetailSerializer,
    SpotImageInputSerializer,
    SpotImageSerializer,
    SpotImagesReplaceSerializer,
    SpotListSerializer,
    SpotSerializer,
    SpotWriteSerializer,
)
from .services import add_spot_image, delete_spot_images, replace_spot_images, search_spots

logger = logging.getLogger(__name__)

SPOT_NOT_FOUND = "Spot couldn't be found"


class IsSpotOwnerOrReadOnly(permissions.BasePermission):
    """Only the owner may change a spot or its images."""

    message = "Spot must belong to the current user"

    def has_object_permission(self, request, view, obj: Spot):  # type: ignore
        if request.method in permissions.SAFE_METHODS:
            return True
        return obj.owner_id == request.user.id


def get_spot_or_404(spot_id) -> Spot:  # type: ignore
    try:
        return Spot.objects.select_related("owner").get(pk=spot_id)
    except Spot.DoesNotExist:
        raise NotFoundError(SPOT_NOT_FOUND)


class SpotScopedMixin:
    """Loads the spot named in the URL and checks object permissions on it."""

    spot_lookup_url_kwarg = "spot_id"

    def initial(self, request, *args, **kwargs):  # type: ignore
        super().initial(request, *args, **kwargs)
        self.spot = get_spot_or_404(kwargs.get(self.spot_lookup_url_kwarg))
        self.check_object_permissions(request, self.spot)

    def get_spot(self) -> Spot:
        return self.spot

    def get_serializer_context(self):  # type: ignore
        context = super().get_serializer_context()
        context["spot"] = getattr(self, "spot", None)
        return context


class SpotViewSet(viewsets.ModelViewSet):
    """Listing, search and CRUD for spots."""

    queryset = Spot.objects.select_related("owner")
    permission_classes = [permissions.IsAuthenticatedOrReadOnly, IsSpotOwnerOrReadOnly]
    filter_backends: list = []
    lookup_value_regex = r"\d+"
    http_method_names = ["get", "post", "put", "delete", "head", "options"]

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        if self.action == "retrieve":
            return qs.prefetch_related("images").annotate(
                num_reviews=Count("reviews", distinct=True),
                avg_rating=Avg("reviews__stars"),
            )
        return qs

    def get_serializer_class(self):  # type: ignore
        if self.action in {"create", "update"}:
            return SpotWriteSerializer
        if self.action == "retrieve":
            return SpotDetailSerializer
        if self.action in {"list", "current"}:
            return SpotListSerializer
        return SpotSerializer

    def get_object(self):  # type: ignore
        try:
            return super().get_object()
        except Http404:
            raise NotFoundError(SPOT_NOT_FOUND)

    def list(self, request, *args, **kwargs):  # type: ignore
        return self._search(self.get_queryset())

    @action(detail=False, methods=["get"], permission_classes=[permissions.IsAuthenticated])
    def current(self, request):  # type: ignore
        return self._search(self.get_queryset().filter(owner=request.user))

    def _search(self, queryset):  # type: ignore
        filterset = SpotFilterSet(self.request.query_params, queryset=queryset, request=self.request)
        if not filterset.is_valid():
            raise translate_validation(filterset.errors)
        pagination = filterset.pagination
        spots = search_spots(queryset, filterset.spot_filters, pagination)
        serializer = self.get_serializer(spots, many=True)
        return Response({"Spots": serializer.data, "page": pagination.page, "size": pagination.size})

    def perform_create(self, serializer):  # type: ignore
        spot = serializer.save(owner=self.request.user)
        logger.info(f"Spot {spot.pk} created by user {self.request.user.pk}")

    def update(self, request, *args, **kwargs):  # type: ignore
        # fields left out of the body keep their current values
        kwargs["partial"] = True
        return super().update(request, *args, **kwargs)

    def destroy(self, request, *args, **kwargs):  # type: ignore
        spot = self.get_object()
        spot_id = spot.pk
        spot.delete()
        logger.info(f"Spot {spot_id} deleted by user {request.user.pk}")
        return Response({"message": "Successfully deleted"}, status=status.HTTP_200_OK)


class SpotImagesView(SpotScopedMixin, APIView):
    """Add one image, replace the whole set, or clear it."""

    permission_classes = [permissions.IsAuthenticated, IsSpotOwnerOrReadOnly]

    def post(self, request, spot_id):  # type: ignore
        serializer = SpotImageInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        image = add_spot_image(self.get_spot(), **serializer.validated_data)
        return Response(SpotImageSerializer(image).data, status=status.HTTP_201_CREATED)

    def put(self, request, spot_id):  # type: ignore
        serializer = SpotImagesReplaceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        spot = self.get_spot()
        try:
            result = replace_spot_images(spot, serializer.validated_data["images"])
        except DjangoValidationError as exc:
            raise serializers.ValidationError(serializers.as_serializer_error(exc))
        return Response(
            {"SpotImages": SpotImageSerializer(result.created, many=True).data},
            status=status.HTTP_200_OK,
        )

    def delete(self, request, spot_id):  # type: ignore
        delete_spot_images(self.get_spot())
        return Response({"message": "Successfully deleted"}, status=status.HTTP_200_OK)
