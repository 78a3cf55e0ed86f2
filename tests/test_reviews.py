"""
Tests for guest reviews and their moderation.
"""

from keyhost.models.booking import BookingStatus
from tests.conftest import BookingFactory


async def _checked_out_booking(db_session, active_property, guest_user):
    return await BookingFactory.create_booking(
        db_session, active_property, guest_user, status=BookingStatus.CHECKED_OUT
    )


class TestReviews:
    """Test review submission, publishing and listing."""

    async def test_review_completed_stay(self, async_client, db_session, active_property, guest_user, guest_headers):
        booking = await _checked_out_booking(db_session, active_property, guest_user)

        response = await async_client.post("/api/reviews", json={
            "booking_id": str(booking.id),
            "rating": 5,
            "cleanliness_rating": 4,
            "comment": "Lovely stay",
        }, headers=guest_headers)

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["status"] == "pending"
        assert data["property_id"] == str(active_property.id)
        assert data["guest"]["first_name"] == "Guest"

    async def test_review_requires_checked_out_booking(
        self, async_client, db_session, active_property, guest_user, guest_headers
    ):
        booking = await BookingFactory.create_booking(db_session, active_property, guest_user)

        response = await async_client.post(
            "/api/reviews", json={"booking_id": str(booking.id), "rating": 4}, headers=guest_headers
        )

        assert response.status_code == 400

    async def test_one_review_per_booking(self, async_client, db_session, active_property, guest_user, guest_headers):
        booking = await _checked_out_booking(db_session, active_property, guest_user)
        payload = {"booking_id": str(booking.id), "rating": 4}

        first = await async_client.post("/api/reviews", json=payload, headers=guest_headers)
        second = await async_client.post("/api/reviews", json=payload, headers=guest_headers)

        assert first.status_code == 201
        assert second.status_code == 409

    async def test_cannot_review_someone_elses_booking(
        self, async_client, db_session, active_property, guest_user, owner_headers
    ):
        booking = await _checked_out_booking(db_session, active_property, guest_user)

        response = await async_client.post(
            "/api/reviews", json={"booking_id": str(booking.id), "rating": 1}, headers=owner_headers
        )

        assert response.status_code == 404

    async def test_rating_out_of_range(self, async_client, db_session, active_property, guest_user, guest_headers):
        booking = await _checked_out_booking(db_session, active_property, guest_user)

        response = await async_client.post(
            "/api/reviews", json={"booking_id": str(booking.id), "rating": 6}, headers=guest_headers
        )

        assert response.status_code == 422

    async def test_only_approved_reviews_are_published(
        self, async_client, db_session, active_property, guest_user, guest_headers, admin_headers
    ):
        booking = await _checked_out_booking(db_session, active_property, guest_user)
        created = await async_client.post(
            "/api/reviews", json={"booking_id": str(booking.id), "rating": 4}, headers=guest_headers
        )
        review_id = created.json()["data"]["id"]

        before = await async_client.get(f"/api/reviews/property/{active_property.id}")
        assert before.json()["data"]["total_reviews"] == 0
        assert before.json()["data"]["average_rating"] is None

        approved = await async_client.patch(
            f"/api/admin/reviews/{review_id}/status", json={"status": "approved"}, headers=admin_headers
        )
        assert approved.status_code == 200

        after = await async_client.get(f"/api/reviews/property/{active_property.id}")
        data = after.json()["data"]
        assert data["total_reviews"] == 1
        assert data["average_rating"] == 4.0

    async def test_my_reviews(self, async_client, db_session, active_property, guest_user, guest_headers):
        booking = await _checked_out_booking(db_session, active_property, guest_user)
        await async_client.post(
            "/api/reviews", json={"booking_id": str(booking.id), "rating": 3}, headers=guest_headers
        )

        response = await async_client.get("/api/reviews/my-reviews", headers=guest_headers)

        assert [review["rating"] for review in response.json()["data"]] == [3]
