"""Review creation and review image management."""

from __future__ import annotations

import logging

from django.db import IntegrityError, transaction  # type: ignore

from apps.core.exceptions import AuthorizationError, ReviewExistsError
from apps.spots.models import Spot

from .models import Review, ReviewImage

logger = logging.getLogger(__name__)

MAX_REVIEW_IMAGES = 10


def create_review(spot: Spot, user, *, review: str, stars: int) -> Review:  # type: ignore
    """Create the user's single review of ``spot``.

    The unique constraint backs the pre-insert check when two requests race.
    """
    if Review.objects.filter(spot=spot, user=user).exists():
        raise ReviewExistsError()
    try:
        with transaction.atomic():
            instance = Review.objects.create(spot=spot, user=user, review=review, stars=stars)
    except IntegrityError:
        raise ReviewExistsError()
    logger.info(f"Review {instance.pk} created for spot {spot.pk} by user {user.pk}")
    return instance


def add_review_image(review: Review, *, url: str) -> ReviewImage:
    with transaction.atomic():
        if review.images.count() >= MAX_REVIEW_IMAGES:
            raise AuthorizationError("Maximum number of images for this resource was reached")
        image = ReviewImage.objects.create(review=review, url=url)
    logger.info(f"Image {image.pk} added to review {review.pk}")
    return image
