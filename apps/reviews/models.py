"""Models for the review domain.

Defines the ``Review`` entity, a star rating with text left by a user on a
spot, and the ``ReviewImage`` URLs attached to it. A user can leave at most
one review per spot.
"""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.core.validators import MaxValueValidator, MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Review(models.Model):
    """A user's review of a spot."""

    spot = models.ForeignKey("spots.Spot", on_delete=models.CASCADE, related_name="reviews")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="reviews"
    )
    review = models.TextField(max_length=4000)
    stars = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(5)],
        help_text=_("Rating from 1 to 5"),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Review")
        verbose_name_plural = _("Reviews")
        ordering = ["-created_at", "-id"]
        constraints = [
            models.UniqueConstraint(fields=["user", "spot"], name="one_review_per_user_per_spot"),
            models.CheckConstraint(
                condition=models.Q(stars__gte=1, stars__lte=5),
                name="review_stars_range",
            ),
        ]
        indexes = [
            models.Index(fields=["spot", "-created_at"], name="reviews_rev_spot_id_8d2b5c_idx"),
        ]

    def __str__(self) -> str:
        return f"Review by {self.user_id} for spot {self.spot_id} ({self.stars} stars)"


class ReviewImage(models.Model):
    review = models.ForeignKey(Review, on_delete=models.CASCADE, related_name="images")
    url = models.URLField(max_length=500)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Review image")
        verbose_name_plural = _("Review images")
        ordering = ["id"]

    def __str__(self) -> str:
        return f"Image {self.pk} for review {self.review_id}"
