"""Integration tests for spot listing, search and CRUD endpoints."""

from __future__ import annotations

from decimal import Decimal
from unittest import mock

from django.test import override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.reviews.models import Review
from apps.spots.models import Spot, SpotImage
from apps.users.models import User


def make_user(username: str) -> User:
    return User.objects.create_user(
        username=username,
        email=f"{username}@example.com",
        password="StrongPass123",
        first_name=username.title(),
        last_name="Tester",
    )


def make_spot(owner: User, **overrides) -> Spot:  # type: ignore
    fields = {
        "address": "123 Disney Lane",
        "city": "San Francisco",
        "state": "California",
        "country": "United States of America",
        "lat": Decimal("37.764536"),
        "lng": Decimal("-122.473049"),
        "name": "App Academy",
        "description": "Place where web developers are created",
        "price": Decimal("123.00"),
    }
    fields.update(overrides)
    return Spot.objects.create(owner=owner, **fields)


class SpotSearchAPITests(APITestCase):
    """Covers validation, filtering, pagination and listing aggregates."""

    def setUp(self) -> None:
        self.owner = make_user("owner")
        self.cheap = make_spot(self.owner, name="Cheap", price=Decimal("30.00"), lat=Decimal("10"))
        self.middle = make_spot(self.owner, name="Middle", price=Decimal("75.00"), lat=Decimal("20"))
        self.pricey = make_spot(self.owner, name="Pricey", price=Decimal("150.00"), lat=Decimal("30"))
        self.url = reverse("spot-list")

    def test_list_without_filters_returns_every_spot(self) -> None:
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual([spot["id"] for spot in response.data["Spots"]], [self.cheap.id, self.middle.id, self.pricey.id])
        self.assertEqual(response.data["page"], 1)
        self.assertEqual(response.data["size"], 20)
        first = response.data["Spots"][0]
        self.assertEqual(first["ownerId"], self.owner.id)
        self.assertIsInstance(first["price"], float)
        self.assertIsInstance(first["lat"], float)
        self.assertIsInstance(first["lng"], float)
        self.assertIsNone(first["avgRating"])
        self.assertIsNone(first["previewImage"])

    def test_price_range_filter(self) -> None:
        response = self.client.get(self.url, {"minPrice": 50, "maxPrice": 100})

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        prices = [spot["price"] for spot in response.data["Spots"]]
        self.assertEqual(prices, [75.0])
        for price in prices:
            self.assertTrue(50 <= price <= 100)

    def test_latitude_bounds_are_inclusive(self) -> None:
        response = self.client.get(self.url, {"minLat": 10, "maxLat": 20})

        names = [spot["name"] for spot in response.data["Spots"]]
        self.assertEqual(names, ["Cheap", "Middle"])

    def test_inverted_latitude_range_is_rejected_before_querying(self) -> None:
        with mock.patch("apps.spots.views.search_spots") as search:
            response = self.client.get(self.url, {"minLat": 50, "maxLat": 10})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(response.data["message"], "Bad Request")
        self.assertEqual(
            response.data["errors"]["maxLat"],
            "Maximum latitude must be between -90 to 90 and greater than minimum latitude",
        )
        search.assert_not_called()

    def test_every_invalid_parameter_is_reported(self) -> None:
        response = self.client.get(
            self.url,
            {"page": 0, "size": "abc", "minLat": -100, "maxLng": 200, "minPrice": -1},
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(
            response.data["errors"],
            {
                "page": "Page must be an integer greater than 0",
                "size": "Size must be an integer greater than 0",
                "minLat": "Minimum latitude must be between -90 to 90",
                "maxLng": "Maximum longitude must be between -180 to 180 and greater than minimum longitude",
                "minPrice": "Minimum price must be greater than or equal to 0",
            },
        )

    def test_max_price_must_exceed_min_price(self) -> None:
        response = self.client.get(self.url, {"minPrice": 100, "maxPrice": 100})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(response.data["errors"]["maxPrice"], "Maximum price must be greater than minimum price")

    def test_pagination_window(self) -> None:
        response = self.client.get(self.url, {"page": 2, "size": 2})

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual([spot["id"] for spot in response.data["Spots"]], [self.pricey.id])

    def test_page_past_the_end_is_empty(self) -> None:
        response = self.client.get(self.url, {"page": 5, "size": 10})

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["Spots"], [])

    @override_settings(SPOTS_MAX_PAGE_SIZE=2)
    def test_size_is_capped(self) -> None:
        response = self.client.get(self.url, {"size": 500})

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["size"], 2)
        self.assertEqual(len(response.data["Spots"]), 2)

    def test_page_number_is_bounded(self) -> None:
        response = self.client.get(self.url, {"page": "100000000000000000000"})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(response.data["errors"], {"page": "Page must not exceed 10000000"})

    def test_average_rating_rounds_half_up_and_preview_image(self) -> None:
        for index, stars in enumerate([4, 4, 5, 4]):
            Review.objects.create(spot=self.cheap, user=make_user(f"guest{index}"), review="Nice", stars=stars)
        SpotImage.objects.create(spot=self.cheap, url="https://example.com/other.png", preview=False)
        SpotImage.objects.create(spot=self.cheap, url="https://example.com/preview.png", preview=True)

        response = self.client.get(self.url)

        listed = {spot["id"]: spot for spot in response.data["Spots"]}
        self.assertEqual(listed[self.cheap.id]["avgRating"], 4.3)
        self.assertEqual(listed[self.cheap.id]["previewImage"], "https://example.com/preview.png")
        self.assertIsNone(listed[self.middle.id]["avgRating"])

    def test_current_lists_only_own_spots(self) -> None:
        other = make_user("other")
        own = make_spot(other, name="Mine", price=Decimal("80.00"))
        self.client.force_authenticate(other)

        response = self.client.get(reverse("spot-current"), {"minPrice": 50})

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual([spot["id"] for spot in response.data["Spots"]], [own.id])

    def test_current_requires_authentication(self) -> None:
        response = self.client.get(reverse("spot-current"))

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data["message"], "Authentication required")


class SpotCrudAPITests(APITestCase):
    def setUp(self) -> None:
        self.owner = make_user("owner")
        self.stranger = make_user("stranger")
        self.spot = make_spot(self.owner)
        self.detail_url = reverse("spot-detail", args=[self.spot.id])
        self.payload = {
            "address": "123 Disney Lane",
            "city": "San Francisco",
            "state": "California",
            "country": "United States of America",
            "lat": 37.7645358,
            "lng": -122.4730327,
            "name": "App Academy",
            "description": "Place where web developers are created",
            "price": 123,
        }

    def test_create_spot(self) -> None:
        self.client.force_authenticate(self.owner)

        response = self.client.post(reverse("spot-list"), self.payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["ownerId"], self.owner.id)
        self.assertEqual(response.data["price"], 123.0)
        self.assertAlmostEqual(response.data["lat"], 37.764536, places=6)
        self.assertTrue(Spot.objects.filter(pk=response.data["id"], owner=self.owner).exists())

    def test_create_requires_authentication(self) -> None:
        response = self.client.post(reverse("spot-list"), self.payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_create_validation_messages(self) -> None:
        self.client.force_authenticate(self.owner)
        payload = dict(self.payload, address="", lat=100, lng=-200, name="x" * 51, price=-5)

        response = self.client.post(reverse("spot-list"), payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(
            response.data["errors"],
            {
                "address": "Street address is required",
                "lat": "Latitude must be within -90 and 90",
                "lng": "Longitude must be within -180 and 180",
                "name": "Name must be less than 50 characters",
                "price": "Price per day must be a positive number",
            },
        )

    def test_price_must_fit_the_price_column(self) -> None:
        self.client.force_authenticate(self.owner)

        response = self.client.post(reverse("spot-list"), dict(self.payload, price="1e15"), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(response.data["errors"], {"price": "Price per day must not exceed 99999999.99"})
        self.assertEqual(Spot.objects.count(), 1)

    def test_largest_storable_price_is_accepted(self) -> None:
        self.client.force_authenticate(self.owner)

        response = self.client.post(reverse("spot-list"), dict(self.payload, price=99999999.99), format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(Spot.objects.get(pk=response.data["id"]).price, Decimal("99999999.99"))

    def test_non_finite_numbers_are_rejected(self) -> None:
        self.client.force_authenticate(self.owner)

        response = self.client.post(
            reverse("spot-list"),
            dict(self.payload, lat="NaN", lng="nan", price="NaN"),
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(
            response.data["errors"],
            {
                "lat": "Latitude must be within -90 and 90",
                "lng": "Longitude must be within -180 and 180",
                "price": "Price per day must be a positive number",
            },
        )
        self.assertEqual(Spot.objects.count(), 1)

    def test_detail_includes_images_owner_and_review_stats(self) -> None:
        SpotImage.objects.create(spot=self.spot, url="https://example.com/a.png", preview=True)
        Review.objects.create(spot=self.spot, user=self.stranger, review="Great", stars=5)
        Review.objects.create(spot=self.spot, user=make_user("another"), review="Fine", stars=4)

        response = self.client.get(self.detail_url)

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["numReviews"], 2)
        self.assertEqual(response.data["avgStarRating"], 4.5)
        self.assertEqual(response.data["SpotImages"][0]["url"], "https://example.com/a.png")
        self.assertTrue(response.data["SpotImages"][0]["preview"])
        self.assertEqual(response.data["Owner"], {"id": self.owner.id, "firstName": "Owner", "lastName": "Tester"})

    def test_missing_spot(self) -> None:
        response = self.client.get(reverse("spot-detail", args=[9999]))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["message"], "Spot couldn't be found")

    def test_owner_can_edit_a_subset_of_fields(self) -> None:
        self.client.force_authenticate(self.owner)

        response = self.client.put(self.detail_url, {"price": 99.5}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["price"], 99.5)
        self.assertEqual(response.data["name"], "App Academy")
        self.spot.refresh_from_db()
        self.assertEqual(self.spot.price, Decimal("99.50"))

    def test_only_owner_can_edit_or_delete(self) -> None:
        self.client.force_authenticate(self.stranger)

        edit = self.client.put(self.detail_url, {"price": 1}, format="json")
        delete = self.client.delete(self.detail_url)

        self.assertEqual(edit.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(edit.data["message"], "Spot must belong to the current user")
        self.assertEqual(delete.status_code, status.HTTP_403_FORBIDDEN)
        self.assertTrue(Spot.objects.filter(pk=self.spot.pk).exists())

    def test_delete_cascades(self) -> None:
        SpotImage.objects.create(spot=self.spot, url="https://example.com/a.png")
        Review.objects.create(spot=self.spot, user=self.stranger, review="Great", stars=5)
        self.client.force_authenticate(self.owner)

        response = self.client.delete(self.detail_url)

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data, {"message": "Successfully deleted"})
        self.assertFalse(Spot.objects.exists())
        self.assertFalse(SpotImage.objects.exists())
        self.assertFalse(Review.objects.exists())


class SpotImagesAPITests(APITestCase):
    def setUp(self) -> None:
        self.owner = make_user("owner")
        self.spot = make_spot(self.owner)
        self.old = SpotImage.objects.create(spot=self.spot, url="https://example.com/old.png", preview=True)
        self.url = reverse("spot-images", args=[self.spot.id])
        self.client.force_authenticate(self.owner)

    def test_add_preview_image_demotes_previous_preview(self) -> None:
        response = self.client.post(self.url, {"url": "https://example.com/new.png", "preview": True}, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertTrue(response.data["preview"])
        self.old.refresh_from_db()
        self.assertFalse(self.old.preview)

    def test_replace_images(self) -> None:
        body = {
            "images": [
                {"url": "https://example.com/1.png", "preview": True},
                {"url": "https://example.com/2.png"},
            ]
        }

        response = self.client.put(self.url, body, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(
            [image["url"] for image in response.data["SpotImages"]],
            ["https://example.com/1.png", "https://example.com/2.png"],
        )
        self.assertEqual(
            list(self.spot.images.values_list("url", flat=True)),
            ["https://example.com/1.png", "https://example.com/2.png"],
        )

    def test_invalid_replacement_keeps_existing_images(self) -> None:
        body = {"images": [{"url": "https://example.com/1.png"}, {"url": "not a url"}]}

        response = self.client.put(self.url, body, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(response.data["errors"]["images"], {"url": "Each image URL must be valid"})
        self.assertEqual(list(self.spot.images.values_list("url", flat=True)), ["https://example.com/old.png"])

    def test_replacement_allows_one_preview(self) -> None:
        body = {
            "images": [
                {"url": "https://example.com/1.png", "preview": True},
                {"url": "https://example.com/2.png", "preview": True},
            ]
        }

        response = self.client.put(self.url, body, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(response.data["errors"]["images"], "Only one image can be the preview image")

    def test_delete_all_images(self) -> None:
        response = self.client.delete(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertFalse(self.spot.images.exists())

    def test_images_belong_to_owner(self) -> None:
        self.client.force_authenticate(make_user("stranger"))

        response = self.client.delete(self.url)

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertTrue(self.spot.images.exists())
