"""
Tests for the admin broadcast group, the websocket endpoint and the tick.
"""

import asyncio

import pytest
from starlette.websockets import WebSocketDisconnect

from database.session import SessionLocal
from services.auth_service import create_access_token
from services.broadcaster import Broadcaster, ADMIN_GROUP
from services.notification_scheduler import NotificationScheduler


class FakeSocket:
    def __init__(self, fail=False):
        self.fail = fail
        self.sent = []

    async def send_json(self, data):
        if self.fail:
            raise RuntimeError("socket closed")
        self.sent.append(data)


class TestBroadcaster:
    def test_publish_reaches_every_member(self):
        broadcaster = Broadcaster()
        a, b = FakeSocket(), FakeSocket()
        broadcaster.join(ADMIN_GROUP, a)
        broadcaster.join(ADMIN_GROUP, b)

        delivered = asyncio.run(broadcaster.publish(ADMIN_GROUP, "notificationUpdate", [{"id": 1}]))

        assert delivered == 2
        assert a.sent == b.sent == [{"event": "notificationUpdate", "data": [{"id": 1}]}]

    def test_failed_socket_is_dropped(self):
        broadcaster = Broadcaster()
        good, dead = FakeSocket(), FakeSocket(fail=True)
        broadcaster.join(ADMIN_GROUP, good)
        broadcaster.join(ADMIN_GROUP, dead)

        delivered = asyncio.run(broadcaster.publish(ADMIN_GROUP, "statsUpdate", {"orders_today": 0}))

        assert delivered == 1
        assert broadcaster.group_size(ADMIN_GROUP) == 1

    def test_leave_and_empty_group(self):
        broadcaster = Broadcaster()
        socket = FakeSocket()
        broadcaster.join(ADMIN_GROUP, socket)
        broadcaster.leave(ADMIN_GROUP, socket)
        broadcaster.leave("other", socket)

        assert broadcaster.group_size(ADMIN_GROUP) == 0
        assert asyncio.run(broadcaster.publish(ADMIN_GROUP, "statsUpdate", {})) == 0


class TestNotificationScheduler:
    def test_tick_publishes_filtered_list_and_stats(self, db, make, recorder):
        make.producer()
        scheduler = NotificationScheduler(recorder, SessionLocal)

        assert asyncio.run(scheduler.tick()) is True

        events = {event: payload for _, event, payload in recorder.events}
        assert events["notificationUpdate"] == [
            {"id": 1, "type": "producer_approval", "count": 1, "message": "1 producers awaiting approval"},
        ]
        assert events["statsUpdate"]["pending_producers"] == 1

    def test_tick_with_nothing_pending_sends_empty_list(self, db, recorder):
        scheduler = NotificationScheduler(recorder, SessionLocal)

        asyncio.run(scheduler.tick())

        assert recorder.events[0] == (ADMIN_GROUP, "notificationUpdate", [])

    def test_failed_tick_is_skipped(self, recorder):
        def broken_factory():
            raise RuntimeError("pool exhausted")

        scheduler = NotificationScheduler(recorder, broken_factory)

        assert asyncio.run(scheduler.tick()) is False
        assert recorder.events == []


class TestAdminSocket:
    def test_rejects_missing_token(self, client):
        with pytest.raises(WebSocketDisconnect) as exc:
            with client.websocket_connect("/ws/admin"):
                pass
        assert exc.value.code == 1008

    def test_rejects_non_admin(self, client, make):
        token = create_access_token(make.user(role="customer"))
        with pytest.raises(WebSocketDisconnect) as exc:
            with client.websocket_connect(f"/ws/admin?token={token}"):
                pass
        assert exc.value.code == 1008

    def test_request_stats(self, client, make, admin_token):
        make.producer()
        with client.websocket_connect(f"/ws/admin?token={admin_token}") as ws:
            ws.send_json({"event": "requestStats"})
            message = ws.receive_json()

        assert message["event"] == "statsUpdate"
        assert message["data"]["pending_producers"] == 1
        assert "timestamp" in message["data"]

    def test_binary_and_malformed_frames_are_ignored(self, client, make, admin_token):
        make.producer()
        with client.websocket_connect(f"/ws/admin?token={admin_token}") as ws:
            ws.send_bytes(b"\x00\x01")
            ws.send_text("{not json")
            ws.send_json({"event": "requestStats"})
            message = ws.receive_json()

        assert message["event"] == "statsUpdate"
        assert message["data"]["pending_producers"] == 1

    def test_two_sessions_receive_identical_tick(self, app, client, db, make, admin_token):
        make.producer()
        make.product(make.producer(approved=True))
        scheduler = NotificationScheduler(app.state.broadcaster, app.state.session_factory)

        with client.websocket_connect(f"/ws/admin?token={admin_token}") as first, \
                client.websocket_connect(f"/ws/admin?token={admin_token}") as second:
            # a round-trip guarantees both sockets have joined the group
            for ws in (first, second):
                ws.send_json({"event": "requestStats"})
                assert ws.receive_json()["event"] == "statsUpdate"
            assert app.state.broadcaster.group_size(ADMIN_GROUP) == 2

            asyncio.run(scheduler.tick())

            received = [[ws.receive_json(), ws.receive_json()] for ws in (first, second)]

        assert received[0] == received[1]
        notifications, stats = received[0]
        assert notifications["event"] == "notificationUpdate"
        assert [n["type"] for n in notifications["data"]] == ["producer_approval", "product_approval"]
        assert stats["event"] == "statsUpdate"

    def test_approval_activity_reaches_socket(self, client, make, admin_token, auth):
        product = make.product(make.producer(), name="Peaches")

        with client.websocket_connect(f"/ws/admin?token={admin_token}") as ws:
            ws.send_json({"event": "requestStats"})
            ws.receive_json()

            resp = client.patch(f"/api/admin/products/{product.id}/approval", json={"is_approved": True}, headers=auth)
            assert resp.status_code == 200

            message = ws.receive_json()

        assert message["event"] == "activityUpdate"
        assert message["data"]["type"] == "product_approval"
        assert message["data"]["description"] == "Product approved: Peaches"
