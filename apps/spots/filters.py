"""FilterSet definitions for spot search and listing."""

from __future__ import annotations

import django_filters  # type: ignore
from django import forms  # type: ignore
from django.conf import settings  # type: ignore

from .models import Spot
from .services import Pagination, SpotFilters


class IntegerFilter(django_filters.NumberFilter):
    field_class = forms.IntegerField


def _bounded(message: str, *, minimum=None, maximum=None):
    """Number filter whose every range or parse failure reports ``message``."""
    return django_filters.NumberFilter(
        min_value=minimum,
        max_value=maximum,
        error_messages={"invalid": message, "min_value": message, "max_value": message},
    )


LAT_MIN_MESSAGE = "Minimum latitude must be between -90 to 90"
LAT_MAX_MESSAGE = "Maximum latitude must be between -90 to 90 and greater than minimum latitude"
LNG_MIN_MESSAGE = "Minimum longitude must be between -180 to 180"
LNG_MAX_MESSAGE = "Maximum longitude must be between -180 to 180 and greater than minimum longitude"
PRICE_MIN_MESSAGE = "Minimum price must be greater than or equal to 0"
PRICE_MAX_MESSAGE = "Maximum price must be greater than minimum price"

MAX_PAGE = 10_000_000
PAGE_MESSAGE = "Page must be an integer greater than 0"
PAGE_MAX_MESSAGE = f"Page must not exceed {MAX_PAGE}"


class SpotSearchForm(forms.Form):
    """Cross-field checks; every violation is recorded, none short-circuits."""

    ordered_bounds = [
        ("minLat", "maxLat", LAT_MAX_MESSAGE),
        ("minLng", "maxLng", LNG_MAX_MESSAGE),
        ("minPrice", "maxPrice", PRICE_MAX_MESSAGE),
    ]

    def clean(self):  # type: ignore
        cleaned_data = super().clean()
        for low, high, message in self.ordered_bounds:
            minimum = cleaned_data.get(low)
            maximum = cleaned_data.get(high)
            if minimum is None or maximum is None or high in self.errors:
                continue
            if maximum <= minimum:
                self.add_error(high, message)
        return cleaned_data


class SpotFilterSet(django_filters.FilterSet):
    """Validated query-string filters for the spot listing.

    The declared filters only parse and range-check the query string; the
    view hands ``spot_filters`` and ``pagination`` to ``search_spots``, which
    builds the predicate and the page window.
    """

    page = IntegerFilter(
        min_value=1,
        max_value=MAX_PAGE,
        error_messages={"invalid": PAGE_MESSAGE, "min_value": PAGE_MESSAGE, "max_value": PAGE_MAX_MESSAGE},
    )
    size = IntegerFilter(
        min_value=1,
        error_messages={
            "invalid": "Size must be an integer greater than 0",
            "min_value": "Size must be an integer greater than 0",
        },
    )
    minLat = _bounded(LAT_MIN_MESSAGE, minimum=-90, maximum=90)
    maxLat = _bounded(LAT_MAX_MESSAGE, minimum=-90, maximum=90)
    minLng = _bounded(LNG_MIN_MESSAGE, minimum=-180, maximum=180)
    maxLng = _bounded(LNG_MAX_MESSAGE, minimum=-180, maximum=180)
    minPrice = _bounded(PRICE_MIN_MESSAGE, minimum=0)
    maxPrice = _bounded(PRICE_MAX_MESSAGE)

    class Meta:
        model = Spot
        fields: list[str] = []
        form = SpotSearchForm

    @property
    def spot_filters(self) -> SpotFilters:
        data = self.form.cleaned_data
        return SpotFilters.from_bounds(
            min_lat=data.get("minLat"),
            max_lat=data.get("maxLat"),
            min_lng=data.get("minLng"),
            max_lng=data.get("maxLng"),
            min_price=data.get("minPrice"),
            max_price=data.get("maxPrice"),
        )

    @property
    def pagination(self) -> Pagination:
        data = self.form.cleaned_data
        size = data.get("size") or settings.SPOTS_DEFAULT_PAGE_SIZE
        return Pagination(
            page=data.get("page") or 1,
            size=min(size, settings.SPOTS_MAX_PAGE_SIZE),
        )
