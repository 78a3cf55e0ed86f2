"""
Tests for KeyhostClient and the probe, run against the app in process.
"""

import httpx
import pytest
from httpx import ASGITransport

from keyhost.cli.probe import build_parser, probe
from keyhost.client import FormValidationError, KeyhostAPIError, KeyhostClient, PropertyForm
from keyhost.database import get_db
from keyhost.main import app
from tests.conftest import PNG_DATA_URL, TEST_PASSWORD


@pytest.fixture
async def api_client(db_session):
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    async with KeyhostClient("http://test", transport=ASGITransport(app=app)) as client:
        yield client
    app.dependency_overrides.clear()


def listing_form(**overrides) -> PropertyForm:
    values = {
        "title": "Sylhet tea garden bungalow",
        "description": "Bungalow between the tea estates",
        "address": "Lakkatura Road",
        "city": "Sylhet",
        "state": "Sylhet Division",
        "base_price": "5200",
    }
    values.update(overrides)
    return PropertyForm(**values)


class TestKeyhostClient:
    """Tests for the API wrapper."""

    async def test_invalid_form_never_sends(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(201, json={"success": True, "data": {}})

        async with KeyhostClient("http://test", token="t", transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(FormValidationError):
                await client.create_property(listing_form(base_price="abc"))
            with pytest.raises(FormValidationError):
                await client.update_property("some-id", listing_form(title=""))

        assert calls == []

    async def test_error_envelope_raises(self):
        def handler(request):
            return httpx.Response(404, json={"success": False, "message": "Property not found"})

        async with KeyhostClient("http://test", transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(KeyhostAPIError) as exc_info:
                await client.delete_property("missing")

        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Property not found"

    async def test_create_and_update_listing(self, api_client, owner_user):
        await api_client.login(owner_user.email, TEST_PASSWORD)
        assert api_client.token

        created = await api_client.create_property(listing_form(images=[PNG_DATA_URL]))
        assert created["title"] == "Sylhet tea garden bungalow"
        assert [image["image_url"] for image in created["images"]] == [PNG_DATA_URL]

        form = PropertyForm.from_property(created)
        form.set_field("bedrooms", "3")
        updated = await api_client.update_property(created["id"], form)
        assert updated["bedrooms"] == 3
        # images left as None keeps the gallery
        assert len(updated["images"]) == 1

        owned = await api_client.list_owner_properties()
        assert owned["pagination"]["total_items"] == 1

    async def test_create_without_images_sends_empty_list(self, api_client, owner_user):
        await api_client.login(owner_user.email, TEST_PASSWORD)

        created = await api_client.create_property(listing_form())
        assert created["images"] == []

    async def test_guest_cannot_create(self, api_client, guest_user):
        await api_client.login(guest_user.email, TEST_PASSWORD)

        with pytest.raises(KeyhostAPIError) as exc_info:
            await api_client.create_property(listing_form())
        assert exc_info.value.status_code == 403

    async def test_bad_login(self, api_client, guest_user):
        with pytest.raises(KeyhostAPIError) as exc_info:
            await api_client.login(guest_user.email, "wrong-password")
        assert exc_info.value.status_code == 401
        assert api_client.token is None


class TestProbe:
    """Tests for the keyhost-probe checks."""

    async def test_public_checks(self, api_client, active_property):
        results = await probe(api_client)

        assert [name for name, _, _ in results] == ["health", "public settings", "properties"]
        assert all(ok for _, ok, _ in results)
        assert results[2][2].startswith("1 ")

    async def test_admin_checks(self, api_client, admin_user):
        results = await probe(api_client, admin_user.email, TEST_PASSWORD)

        assert [name for name, ok, _ in results if not ok] == []
        assert len(results) == 6

    async def test_failed_login_stops(self, api_client, admin_user):
        results = await probe(api_client, admin_user.email, "wrong-password")

        assert results[-1][0] == "login"
        assert results[-1][1] is False
        assert results[-1][2].startswith("HTTP 401")

    async def test_guest_fails_admin_checks(self, api_client, guest_user):
        results = dict((name, ok) for name, ok, _ in await probe(api_client, guest_user.email, TEST_PASSWORD))

        assert results["login"] is True
        assert results["admin dashboard"] is False
        assert results["owner properties"] is False

    def test_parser_defaults(self, monkeypatch):
        monkeypatch.setenv("KEYHOST_PROBE_EMAIL", "ops@example.com")
        args = build_parser().parse_args(["--base-url", "http://api.local"])

        assert args.base_url == "http://api.local"
        assert args.email == "ops@example.com"
        assert args.timeout == 10.0
