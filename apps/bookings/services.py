"""Availability checking and booking creation.

A booking occupies the half-open range ``[start_date, end_date)``, so a stay
that ends on the day another begins does not conflict with it. Conflicts are
reported per request boundary: ``startDate`` when the requested start falls
inside an existing stay, ``endDate`` when the requested end does, and both
when an existing stay lies wholly inside the requested range.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date

from django.db import transaction  # type: ignore
from django.db.models import Q, QuerySet  # type: ignore
from django.db.utils import NotSupportedError  # type: ignore

from apps.core.exceptions import BookingConflictError, OwnSpotBookingError
from apps.spots.models import Spot

from .models import Booking

logger = logging.getLogger(__name__)

START_CONFLICT = "Start date conflicts with an existing booking"
END_CONFLICT = "End date conflicts with an existing booking"


@dataclass(frozen=True)
class ConflictResult:
    """Per-field conflict messages; empty when the range is free."""

    errors: dict[str, str] = field(default_factory=dict)

    @property
    def has_conflict(self) -> bool:
        return bool(self.errors)


def _lock_queryset_if_possible(queryset):  # type: ignore
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection().in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


def conflict_candidates(spot: Spot, requested_start: date, requested_end: date) -> QuerySet:
    """Bookings of ``spot`` touching the closed range [requested_start, requested_end].

    Coarse on purpose: stays that merely share a boundary date are included
    here and dismissed by ``boundary_conflicts``.
    """
    touches = Q(start_date__range=(requested_start, requested_end)) | Q(
        end_date__range=(requested_start, requested_end)
    )
    encloses = Q(start_date__lte=requested_start, end_date__gte=requested_end)
    return Booking.objects.filter(spot=spot).filter(touches | encloses)


def boundary_conflicts(
    booked_start: date,
    booked_end: date,
    requested_start: date,
    requested_end: date,
) -> set[str]:
    """Names of the request fields that fall inside one existing stay."""
    fields: set[str] = set()
    if booked_start < requested_start < booked_end:
        fields.add("startDate")
    if booked_start < requested_end < booked_end:
        fields.add("endDate")
    if requested_start <= booked_start and booked_end <= requested_end:
        fields.update(("startDate", "endDate"))
    return fields


def check_conflict(spot: Spot, requested_start: date, requested_end: date) -> ConflictResult:
    flagged: set[str] = set()
    candidates = conflict_candidates(spot, requested_start, requested_end)
    for booked_start, booked_end in candidates.values_list("start_date", "end_date"):
        flagged |= boundary_conflicts(booked_start, booked_end, requested_start, requested_end)

    errors = {}
    if "startDate" in flagged:
        errors["startDate"] = START_CONFLICT
    if "endDate" in flagged:
        errors["endDate"] = END_CONFLICT
    return ConflictResult(errors)


def create_booking(spot: Spot, user, start_date: date, end_date: date) -> Booking:  # type: ignore
    """Check availability and insert the booking under a lock on the spot row.

    Raises ``OwnSpotBookingError`` for the spot's owner and
    ``BookingConflictError`` (with the per-field map) when the dates overlap
    an existing booking; nothing is written in either case.
    """
    if spot.owner_id == user.pk:
        raise OwnSpotBookingError()

    with transaction.atomic():
        # serialises concurrent bookings of the same spot
        _lock_queryset_if_possible(Spot.objects.filter(pk=spot.pk)).first()
        result = check_conflict(spot, start_date, end_date)
        if result.has_conflict:
            logger.info(
                f"Booking of spot {spot.pk} by user {user.pk} for {start_date} - {end_date} "
                f"rejected: {sorted(result.errors)}"
            )
            raise BookingConflictError(errors=result.errors)
        booking = Booking.objects.create(
            spot=spot,
            user=user,
            start_date=start_date,
            end_date=end_date,
        )

    logger.info(f"Booking {booking.pk} created for spot {spot.pk} by user {user.pk}")
    return booking
