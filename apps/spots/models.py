"""Spot domain models for SpotBook."""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.validators import MaxValueValidator, MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Spot(models.Model):
    """A bookable listing owned by a single user."""

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="spots",
    )
    address = models.CharField(max_length=255)
    city = models.CharField(max_length=100)
    state = models.CharField(max_length=100)
    country = models.CharField(max_length=100)
    lat = models.DecimalField(
        max_digits=9,
        decimal_places=6,
        validators=[MinValueValidator(Decimal("-90")), MaxValueValidator(Decimal("90"))],
    )
    lng = models.DecimalField(
        max_digits=9,
        decimal_places=6,
        validators=[MinValueValidator(Decimal("-180")), MaxValueValidator(Decimal("180"))],
    )
    name = models.CharField(max_length=50)
    description = models.TextField()
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
        help_text=_("Price per day."),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Spot")
        verbose_name_plural = _("Spots")
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price__gt=0),
                name="spot_price_positive",
            ),
        ]
        indexes = [
            models.Index(fields=["lat", "lng"], name="spots_spot_lat_0b6f3e_idx"),
            models.Index(fields=["price"], name="spots_spot_price_5c1d2a_idx"),
        ]

    def __str__(self) -> str:
        return self.name


class SpotImage(models.Model):
    """Image attached to a spot; the ``preview`` one is shown in listings."""

    spot = models.ForeignKey(Spot, on_delete=models.CASCADE, related_name="images")
    url = models.URLField(max_length=500)
    preview = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Spot image")
        verbose_name_plural = _("Spot images")
        ordering = ["id"]
        indexes = [
            models.Index(fields=["spot", "preview"], name="spots_spoti_spot_id_7e2a41_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.spot_id}: {self.url}"
