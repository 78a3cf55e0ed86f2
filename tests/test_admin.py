"""
Tests for the admin dashboard, moderation and user management.
"""

from datetime import date
from decimal import Decimal

from keyhost.models.booking import BookingStatus, PaymentStatus
from keyhost.models.property import PropertyStatus
from keyhost.services.admin import DASHBOARD_DAYS, AdminService
from tests.conftest import BookingFactory, PropertyFactory


class TestDashboard:
    """Test GET /api/admin/dashboard."""

    async def test_dashboard_totals(self, async_client, db_session, active_property, owner_user, guest_user, admin_headers):
        await PropertyFactory.create_property(db_session, owner_user, status=PropertyStatus.PENDING_APPROVAL)
        paid = await BookingFactory.create_booking(db_session, active_property, guest_user)
        paid.payment_status = PaymentStatus.PAID
        await db_session.commit()
        await BookingFactory.create_booking(db_session, active_property, guest_user, status=BookingStatus.CANCELLED)

        response = await async_client.get("/api/admin/dashboard", headers=admin_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        stats = data["stats"]
        assert stats["total_users"] == 3
        assert stats["total_properties"] == 1
        assert stats["pending_properties"] == 1
        assert stats["total_bookings"] == 1
        assert Decimal(stats["total_revenue"]) == paid.total_amount
        assert stats["pending_reports"] == 0
        assert len(data["recent_bookings"]) == 2
        assert len(data["daily_stats"]) == DASHBOARD_DAYS

    async def test_daily_stats_exclude_cancelled_revenue(self, db_session, active_property, guest_user):
        kept = await BookingFactory.create_booking(db_session, active_property, guest_user)
        await BookingFactory.create_booking(db_session, active_property, guest_user, status=BookingStatus.CANCELLED)

        dashboard = await AdminService(db_session).dashboard(today=kept.created_at.date())
        today = dashboard["daily_stats"][-1]

        assert today["day"] == kept.created_at.date()
        assert today["bookings"] == 2
        assert today["revenue"] == kept.total_amount

    async def test_empty_days_are_zero(self, db_session):
        dashboard = await AdminService(db_session).dashboard(today=date(2024, 1, 7))

        days = dashboard["daily_stats"]
        assert [entry["day"] for entry in days] == [date(2024, 1, d) for d in range(1, 8)]
        assert all(entry["bookings"] == 0 for entry in days)

    async def test_dashboard_requires_admin(self, async_client, owner_headers):
        response = await async_client.get("/api/admin/dashboard", headers=owner_headers)
        assert response.status_code == 403


class TestModeration:
    """Test listing and user moderation."""

    async def test_approve_listing(self, async_client, db_session, owner_user, admin_headers):
        listing = await PropertyFactory.create_property(
            db_session, owner_user, status=PropertyStatus.PENDING_APPROVAL
        )

        response = await async_client.patch(
            f"/api/admin/properties/{listing.id}/status", json={"status": "active"}, headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json()["data"]["status"] == "active"
        public = await async_client.get(f"/api/properties/{listing.id}")
        assert public.status_code == 200

    async def test_list_users_by_type(self, async_client, owner_user, guest_user, admin_headers):
        response = await async_client.get(
            "/api/admin/users", params={"user_type": "property_owner"}, headers=admin_headers
        )

        assert response.status_code == 200
        emails = [user["email"] for user in response.json()["data"]["items"]]
        assert emails == [owner_user.email]

    async def test_deactivate_user_blocks_access(self, async_client, guest_user, guest_headers, admin_headers):
        response = await async_client.patch(
            f"/api/admin/users/{guest_user.id}/status", json={"is_active": False}, headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json()["data"]["is_active"] is False
        me = await async_client.get("/api/auth/me", headers=guest_headers)
        assert me.status_code == 403

    async def test_admin_cannot_deactivate_self(self, async_client, admin_user, admin_headers):
        response = await async_client.patch(
            f"/api/admin/users/{admin_user.id}/status", json={"is_active": False}, headers=admin_headers
        )
        assert response.status_code == 400
