"""
Tests for owner property management and the public property listing.
"""

import uuid
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from keyhost.config import settings
from keyhost.models.booking import BookingStatus
from keyhost.models.image import ImageType, PropertyImage
from keyhost.models.property import PropertyStatus
from tests.conftest import PNG_DATA_URL, BookingFactory, PropertyFactory, auth_headers


def property_payload(**overrides) -> dict:
    payload = {
        "title": "Gulshan lake apartment",
        "description": "Bright two bedroom flat",
        "address": "Road 71, Gulshan 2",
        "city": "Dhaka",
        "state": "Dhaka Division",
        "country": "Bangladesh",
        "base_price": 4500,
    }
    payload.update(overrides)
    return payload


async def _image_rows(db_session, property_id) -> int:
    result = await db_session.execute(
        select(func.count()).select_from(PropertyImage).where(PropertyImage.property_id == property_id)
    )
    return result.scalar_one()


class TestCreateProperty:
    """Test POST /api/property-owner/properties."""

    async def test_create_with_empty_images_creates_no_rows(self, async_client, owner_headers, db_session):
        response = await async_client.post(
            "/api/property-owner/properties",
            json=property_payload(images=[]),
            headers=owner_headers,
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["images"] == []
        assert data["status"] == "pending_approval"
        assert await _image_rows(db_session, uuid.UUID(data["id"])) == 0

    async def test_create_applies_defaults(self, async_client, owner_headers):
        response = await async_client.post(
            "/api/property-owner/properties",
            json=property_payload(bedrooms="", max_guests=None),
            headers=owner_headers,
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["property_type"] == "apartment"
        assert data["bedrooms"] == 1
        assert data["bathrooms"] == 1
        assert data["max_guests"] == 2
        assert data["minimum_stay"] == 1
        assert data["check_in_time"] == "15:00:00"
        assert data["check_out_time"] == "11:00:00"
        assert Decimal(data["base_price"]) == Decimal("4500")
        assert Decimal(data["cleaning_fee"]) == Decimal("0")

    async def test_images_stored_verbatim_in_order(self, async_client, owner_headers):
        second = PNG_DATA_URL + "AA"
        response = await async_client.post(
            "/api/property-owner/properties",
            json=property_payload(images=[PNG_DATA_URL, second]),
            headers=owner_headers,
        )

        assert response.status_code == 201
        images = response.json()["data"]["images"]
        assert [image["image_url"] for image in images] == [PNG_DATA_URL, second]
        assert [image["image_type"] for image in images] == ["main", "gallery"]
        assert [image["alt_text"] for image in images] == ["Property image 1", "Property image 2"]
        assert [image["sort_order"] for image in images] == [0, 1]

    async def test_long_data_url_round_trips(self, async_client, owner_headers):
        long_url = "data:image/jpeg;base64," + "A" * 20000
        response = await async_client.post(
            "/api/property-owner/properties",
            json=property_payload(images=[long_url]),
            headers=owner_headers,
        )

        assert response.status_code == 201
        assert response.json()["data"]["images"][0]["image_url"] == long_url

    async def test_too_many_images_rejected(self, async_client, owner_headers):
        images = [PNG_DATA_URL] * (settings.max_images_per_property + 1)
        response = await async_client.post(
            "/api/property-owner/properties",
            json=property_payload(images=images),
            headers=owner_headers,
        )

        assert response.status_code == 400
        assert response.json()["success"] is False

    @pytest.mark.parametrize("missing", ["title", "description", "address", "city", "state", "country", "base_price"])
    async def test_required_fields(self, async_client, owner_headers, missing):
        payload = property_payload()
        del payload[missing]

        response = await async_client.post("/api/property-owner/properties", json=payload, headers=owner_headers)

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    async def test_non_numeric_price_rejected(self, async_client, owner_headers):
        response = await async_client.post(
            "/api/property-owner/properties",
            json=property_payload(base_price="abc"),
            headers=owner_headers,
        )
        assert response.status_code == 422

    async def test_guest_cannot_create(self, async_client, guest_headers):
        response = await async_client.post(
            "/api/property-owner/properties", json=property_payload(), headers=guest_headers
        )
        assert response.status_code == 403


class TestOwnerPropertyAccess:
    """Test listing, reading, updating and deleting own properties."""

    async def test_list_only_own_properties(self, async_client, db_session, owner_user, other_owner, owner_headers):
        await PropertyFactory.create_property(db_session, owner_user, title="Mine")
        await PropertyFactory.create_property(db_session, other_owner, title="Theirs")

        response = await async_client.get("/api/property-owner/properties", headers=owner_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert [item["title"] for item in data["items"]] == ["Mine"]
        assert data["pagination"]["total_items"] == 1

    async def test_list_status_filter(self, async_client, db_session, owner_user, owner_headers):
        await PropertyFactory.create_property(db_session, owner_user, title="Live")
        await PropertyFactory.create_property(
            db_session, owner_user, title="Waiting", status=PropertyStatus.PENDING_APPROVAL
        )

        response = await async_client.get(
            "/api/property-owner/properties", params={"status": "pending_approval"}, headers=owner_headers
        )

        assert [item["title"] for item in response.json()["data"]["items"]] == ["Waiting"]

    async def test_other_owners_property_is_not_found(self, async_client, db_session, other_owner, owner_headers):
        theirs = await PropertyFactory.create_property(db_session, other_owner)

        response = await async_client.get(f"/api/property-owner/properties/{theirs.id}", headers=owner_headers)

        assert response.status_code == 404

    async def test_update_without_images_keeps_gallery(self, async_client, db_session, active_property, owner_headers):
        response = await async_client.put(
            f"/api/property-owner/properties/{active_property.id}",
            json={"title": "Renamed cottage", "description": ""},
            headers=owner_headers,
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["title"] == "Renamed cottage"
        assert data["description"] == active_property.description
        assert len(data["images"]) == 1
        assert await _image_rows(db_session, active_property.id) == 1

    async def test_update_with_image_list_replaces_gallery(
        self, async_client, db_session, active_property, owner_headers
    ):
        new_images = ["data:image/png;base64,AAAA", "data:image/png;base64,BBBB"]
        response = await async_client.put(
            f"/api/property-owner/properties/{active_property.id}",
            json={"images": new_images},
            headers=owner_headers,
        )

        assert response.status_code == 200
        images = response.json()["data"]["images"]
        assert [image["image_url"] for image in images] == new_images
        assert images[0]["image_type"] == ImageType.MAIN.value
        assert await _image_rows(db_session, active_property.id) == 2

    async def test_update_with_empty_list_clears_gallery(self, async_client, db_session, active_property, owner_headers):
        response = await async_client.put(
            f"/api/property-owner/properties/{active_property.id}",
            json={"images": []},
            headers=owner_headers,
        )

        assert response.status_code == 200
        assert await _image_rows(db_session, active_property.id) == 0

    async def test_update_with_nothing_to_change(self, async_client, active_property, owner_headers):
        response = await async_client.put(
            f"/api/property-owner/properties/{active_property.id}",
            json={"title": "", "city": None},
            headers=owner_headers,
        )

        assert response.status_code == 400

    async def test_update_drops_blank_images(self, async_client, db_session, active_property, owner_headers):
        response = await async_client.put(
            f"/api/property-owner/properties/{active_property.id}",
            json={"images": ["", PNG_DATA_URL]},
            headers=owner_headers,
        )

        assert response.status_code == 200
        images = response.json()["data"]["images"]
        assert [image["image_url"] for image in images] == [PNG_DATA_URL]
        assert images[0]["image_type"] == ImageType.MAIN.value
        assert await _image_rows(db_session, active_property.id) == 1

        listing = await async_client.get("/api/properties")
        assert listing.json()["data"]["items"][0]["main_image"] == PNG_DATA_URL

    async def test_update_null_clears_optional_fields(self, async_client, db_session, owner_user, owner_headers):
        prop = await PropertyFactory.create_property(
            db_session, owner_user,
            postal_code="1212", latitude=Decimal("23.78"), longitude=Decimal("90.41"),
            size_sqft=900, maximum_stay=14,
        )

        response = await async_client.put(
            f"/api/property-owner/properties/{prop.id}",
            json={
                "postal_code": None,
                "latitude": None,
                "longitude": None,
                "size_sqft": None,
                "maximum_stay": None,
            },
            headers=owner_headers,
        )

        assert response.status_code == 200
        data = response.json()["data"]
        for field in ("postal_code", "latitude", "longitude", "size_sqft", "maximum_stay"):
            assert data[field] is None

    async def test_update_null_on_required_field_is_skipped(self, async_client, active_property, owner_headers):
        response = await async_client.put(
            f"/api/property-owner/properties/{active_property.id}",
            json={"base_price": None, "title": None, "bedrooms": 3},
            headers=owner_headers,
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["bedrooms"] == 3
        assert data["title"] == active_property.title
        assert Decimal(data["base_price"]) == active_property.base_price

    async def test_delete_sets_inactive(self, async_client, active_property, owner_headers):
        response = await async_client.delete(
            f"/api/property-owner/properties/{active_property.id}", headers=owner_headers
        )

        assert response.status_code == 200
        assert response.json()["data"]["status"] == "inactive"

        public = await async_client.get(f"/api/properties/{active_property.id}")
        assert public.status_code == 404

    async def test_delete_refused_with_active_bookings(
        self, async_client, db_session, active_property, guest_user, owner_headers
    ):
        await BookingFactory.create_booking(db_session, active_property, guest_user, status=BookingStatus.CONFIRMED)

        response = await async_client.delete(
            f"/api/property-owner/properties/{active_property.id}", headers=owner_headers
        )

        assert response.status_code == 400

    async def test_admin_can_manage_any_listing(self, async_client, db_session, active_property, admin_user):
        response = await async_client.get(
            "/api/property-owner/properties", headers=auth_headers(admin_user)
        )
        assert response.status_code == 200


class TestPublicProperties:
    """Test GET /api/properties."""

    async def test_only_active_listed(self, async_client, db_session, owner_user):
        await PropertyFactory.create_property(db_session, owner_user, title="Visible", images=[PNG_DATA_URL])
        await PropertyFactory.create_property(
            db_session, owner_user, title="Hidden", status=PropertyStatus.PENDING_APPROVAL
        )

        response = await async_client.get("/api/properties")

        assert response.status_code == 200
        items = response.json()["data"]["items"]
        assert [item["title"] for item in items] == ["Visible"]
        assert items[0]["main_image"] == PNG_DATA_URL

    async def test_filters(self, async_client, db_session, owner_user):
        await PropertyFactory.create_property(db_session, owner_user, title="Cheap Dhaka", base_price=Decimal("50"))
        await PropertyFactory.create_property(
            db_session, owner_user, title="Sylhet villa", city="Sylhet", base_price=Decimal("300"), max_guests=8
        )

        by_city = await async_client.get("/api/properties", params={"city": "sylhet"})
        assert [item["title"] for item in by_city.json()["data"]["items"]] == ["Sylhet villa"]

        by_price = await async_client.get("/api/properties", params={"max_price": 100})
        assert [item["title"] for item in by_price.json()["data"]["items"]] == ["Cheap Dhaka"]

        by_guests = await async_client.get("/api/properties", params={"guests": 6})
        assert [item["title"] for item in by_guests.json()["data"]["items"]] == ["Sylhet villa"]

    async def test_detail_includes_owner_and_images(self, async_client, active_property):
        response = await async_client.get(f"/api/properties/{active_property.id}")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["owner"]["first_name"] == "Owner"
        assert data["images"][0]["image_url"] == PNG_DATA_URL
