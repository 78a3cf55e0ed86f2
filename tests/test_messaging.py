"""
Tests for guest and host conversations.
"""

from tests.conftest import UserFactory, auth_headers


async def _start(async_client, property_id, headers, message="Is parking available?"):
    return await async_client.post(
        "/api/messages/start", json={"property_id": str(property_id), "message": message}, headers=headers
    )


class TestMessaging:
    """Test starting, replying to and reading conversations."""

    async def test_start_conversation(self, async_client, active_property, guest_headers, guest_user):
        response = await _start(async_client, active_property.id, guest_headers)

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["content"] == "Is parking available?"
        assert data["sender_id"] == str(guest_user.id)
        assert data["is_read"] is False

    async def test_second_start_reuses_thread(self, async_client, active_property, guest_headers):
        first = await _start(async_client, active_property.id, guest_headers)
        second = await _start(async_client, active_property.id, guest_headers, message="And wifi?")

        assert first.json()["data"]["conversation_id"] == second.json()["data"]["conversation_id"]

        inbox = await async_client.get("/api/messages/conversations", headers=guest_headers)
        rows = inbox.json()["data"]
        assert len(rows) == 1
        assert rows[0]["last_message"] == "And wifi?"
        assert rows[0]["property_title"] == active_property.title

    async def test_host_inbox_and_read_state(self, async_client, active_property, guest_headers, owner_headers):
        started = await _start(async_client, active_property.id, guest_headers)
        conversation_id = started.json()["data"]["conversation_id"]

        inbox = await async_client.get("/api/messages/conversations", headers=owner_headers)
        row = inbox.json()["data"][0]
        assert row["unread_count"] == 1
        assert row["other_user"]["first_name"] == "Guest"

        detail = await async_client.get(f"/api/messages/conversations/{conversation_id}", headers=owner_headers)
        assert detail.status_code == 200
        assert [message["content"] for message in detail.json()["data"]["messages"]] == ["Is parking available?"]

        inbox_after = await async_client.get("/api/messages/conversations", headers=owner_headers)
        assert inbox_after.json()["data"][0]["unread_count"] == 0

    async def test_reply_keeps_order(self, async_client, active_property, guest_headers, owner_headers):
        started = await _start(async_client, active_property.id, guest_headers)
        conversation_id = started.json()["data"]["conversation_id"]

        reply = await async_client.post(
            f"/api/messages/conversations/{conversation_id}/reply",
            json={"message": "Yes, one spot"},
            headers=owner_headers,
        )
        assert reply.status_code == 201

        detail = await async_client.get(f"/api/messages/conversations/{conversation_id}", headers=guest_headers)
        contents = [message["content"] for message in detail.json()["data"]["messages"]]
        assert contents == ["Is parking available?", "Yes, one spot"]

    async def test_outsider_cannot_read_or_reply(self, async_client, db_session, active_property, guest_headers):
        started = await _start(async_client, active_property.id, guest_headers)
        conversation_id = started.json()["data"]["conversation_id"]
        outsider = auth_headers(await UserFactory.create_user(db_session))

        detail = await async_client.get(f"/api/messages/conversations/{conversation_id}", headers=outsider)
        reply = await async_client.post(
            f"/api/messages/conversations/{conversation_id}/reply", json={"message": "hi"}, headers=outsider
        )

        assert detail.status_code == 404
        assert reply.status_code == 403

    async def test_cannot_message_own_property(self, async_client, active_property, owner_headers):
        response = await _start(async_client, active_property.id, owner_headers)
        assert response.status_code == 400

    async def test_blank_message_rejected(self, async_client, active_property, guest_headers):
        response = await _start(async_client, active_property.id, guest_headers, message="   ")
        assert response.status_code == 422
