"""URL routing for the spots domain."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import SimpleRouter  # type: ignore

from apps.bookings.views import SpotBookingViewSet
from apps.reviews.views import SpotReviewViewSet

from .views import SpotImagesView, SpotViewSet

router = SimpleRouter()
router.register(r"", SpotViewSet, basename="spot")

spot_bookings = SpotBookingViewSet.as_view({"get": "list", "post": "create"})
spot_reviews = SpotReviewViewSet.as_view({"get": "list", "post": "create"})

urlpatterns = [
    path("", include(router.urls)),
    path("<int:spot_id>/images/", SpotImagesView.as_view(), name="spot-images"),
    path("<int:spot_id>/bookings/", spot_bookings, name="spot-bookings"),
    path("<int:spot_id>/reviews/", spot_reviews, name="spot-reviews"),
]
