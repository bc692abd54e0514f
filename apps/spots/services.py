"""Search predicate construction, listing aggregation and image management.

The search side turns validated filter values into a single ``Q`` plus a
``(limit, offset)`` window; the listing side annotates each spot with its
average review rating and preview image. Image replacement is atomic: the
old set survives untouched unless every new image validates.
"""

from __future__ import annotations

import logging
import operator
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from functools import reduce
from typing import Any, Iterable, Mapping

from django.db import transaction  # type: ignore
from django.db.models import Avg, OuterRef, Q, QuerySet, Subquery  # type: ignore

from .models import Spot, SpotImage

logger = logging.getLogger(__name__)

RATING_STEP = Decimal("0.1")


@dataclass(frozen=True)
class RangeFilter:
    """Inclusive bounds on one numeric column; either side may be open."""

    field: str
    minimum: Decimal | None = None
    maximum: Decimal | None = None

    def as_q(self) -> Q:
        where = Q()
        if self.minimum is not None:
            where &= Q(**{f"{self.field}__gte": self.minimum})
        if self.maximum is not None:
            where &= Q(**{f"{self.field}__lte": self.maximum})
        return where


@dataclass(frozen=True)
class SpotFilters:
    lat: RangeFilter | None = None
    lng: RangeFilter | None = None
    price: RangeFilter | None = None

    @classmethod
    def from_bounds(
        cls,
        *,
        min_lat: Decimal | None = None,
        max_lat: Decimal | None = None,
        min_lng: Decimal | None = None,
        max_lng: Decimal | None = None,
        min_price: Decimal | None = None,
        max_price: Decimal | None = None,
    ) -> "SpotFilters":
        return cls(
            lat=_span("lat", min_lat, max_lat),
            lng=_span("lng", min_lng, max_lng),
            price=_span("price", min_price, max_price),
        )

    def ranges(self) -> list[RangeFilter]:
        return [item for item in (self.lat, self.lng, self.price) if item is not None]


def _span(column: str, minimum: Decimal | None, maximum: Decimal | None) -> RangeFilter | None:
    if minimum is None and maximum is None:
        return None
    return RangeFilter(column, minimum, maximum)


@dataclass(frozen=True)
class Pagination:
    page: int = 1
    size: int = 20

    @property
    def limit(self) -> int:
        return self.size

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.size


def build_spot_query(filters: SpotFilters, pagination: Pagination) -> tuple[Q, tuple[int, int]]:
    """Fold the present ranges into one predicate and compute the page window.

    Dimensions without bounds contribute nothing; with no filters at all the
    predicate is an empty ``Q()`` which matches every spot.
    """
    where = reduce(operator.and_, (item.as_q() for item in filters.ranges()), Q())
    return where, (pagination.limit, pagination.offset)


def preview_image_subquery(spot_ref: str = "pk") -> Subquery:
    """URL of the first preview image of the spot referenced by ``spot_ref``."""
    images = SpotImage.objects.filter(spot=OuterRef(spot_ref), preview=True).order_by("id")
    return Subquery(images.values("url")[:1])


def annotate_listing(queryset: QuerySet) -> QuerySet:
    return queryset.annotate(
        avg_rating=Avg("reviews__stars"),
        preview_image=preview_image_subquery(),
    )


def round_rating(value: Any) -> float | None:
    """Round an average star rating half-up to one decimal place."""
    if value is None:
        return None
    return float(Decimal(str(value)).quantize(RATING_STEP, rounding=ROUND_HALF_UP))


def search_spots(queryset: QuerySet, filters: SpotFilters, pagination: Pagination) -> QuerySet:
    where, (limit, offset) = build_spot_query(filters, pagination)
    listing = annotate_listing(queryset.filter(where)).order_by("id")
    return listing[offset:offset + limit]


def add_spot_image(spot: Spot, *, url: str, preview: bool = False) -> SpotImage:
    """Attach one image; a new preview image demotes the previous one."""
    with transaction.atomic():
        if preview:
            spot.images.filter(preview=True).update(preview=False)
        image = SpotImage(spot=spot, url=url, preview=preview)
        image.full_clean()
        image.save()
    logger.info(f"Image {image.pk} added to spot {spot.pk}")
    return image


@dataclass
class ImageReplacement:
    deleted: int = 0
    created: list[SpotImage] = field(default_factory=list)


def replace_spot_images(spot: Spot, images: Iterable[Mapping[str, Any]]) -> ImageReplacement:
    """Swap the spot's whole image set for ``images`` in one transaction.

    Each new image is validated as it is created; the first invalid one
    raises ``django.core.exceptions.ValidationError`` and rolls back both the
    deletion and any images created before it.
    """
    result = ImageReplacement()
    with transaction.atomic():
        result.deleted, _ = spot.images.all().delete()
        has_preview = False
        for item in images:
            preview = bool(item.get("preview", False))
            if preview and has_preview:
                preview = False
            has_preview = has_preview or preview
            image = SpotImage(spot=spot, url=item.get("url") or "", preview=preview)
            image.full_clean()
            image.save()
            result.created.append(image)
    logger.info(
        f"Replaced images of spot {spot.pk}: {result.deleted} removed, {len(result.created)} created"
    )
    return result


def delete_spot_images(spot: Spot) -> int:
    with transaction.atomic():
        deleted, _ = spot.images.all().delete()
    logger.info(f"Deleted {deleted} images of spot {spot.pk}")
    return deleted
