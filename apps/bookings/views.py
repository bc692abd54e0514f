"""Booking API views."""

from __future__ import annotations

from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.spots.views import SpotScopedMixin

from .models import Booking
from .serializers import (
    BookingCreateSerializer,
    BookingDatesSerializer,
    CurrentUserBookingSerializer,
    SpotOwnerBookingSerializer,
)


class SpotBookingViewSet(SpotScopedMixin, viewsets.GenericViewSet):
    """Bookings of the spot in the URL; the owner sees who booked."""

    permission_classes = [permissions.IsAuthenticated]
    queryset = Booking.objects.select_related("user")
    serializer_class = BookingCreateSerializer

    def get_queryset(self):  # type: ignore
        return super().get_queryset().filter(spot=self.get_spot()).order_by("start_date", "id")

    def list(self, request, spot_id=None):  # type: ignore
        if self.get_spot().owner_id == request.user.id:
            serializer_class = SpotOwnerBookingSerializer
        else:
            serializer_class = BookingDatesSerializer
        data = serializer_class(self.get_queryset(), many=True).data
        return Response({"Bookings": data})

    def create(self, request, spot_id=None):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data, status=status.HTTP_201_CREATED)


class BookingViewSet(viewsets.GenericViewSet):
    permission_classes = [permissions.IsAuthenticated]
    queryset = Booking.objects.select_related("spot").prefetch_related("spot__images")
    serializer_class = CurrentUserBookingSerializer

    @action(detail=False, methods=["get"])
    def current(self, request):  # type: ignore
        bookings = self.get_queryset().filter(user=request.user).order_by("start_date", "id")
        return Response({"Bookings": self.get_serializer(bookings, many=True).data})
