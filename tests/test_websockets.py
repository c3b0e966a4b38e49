"""End-to-end tests over the real websocket endpoint."""
import pytest
from fastapi.testclient import TestClient

from signaling.app import create_app


@pytest.fixture
def client():
    app = create_app()
    with TestClient(app) as c:
        yield c


def connect(client):
    ws = client.websocket_connect("/ws")
    ws.__enter__()
    hello = ws.receive_json()
    assert hello["type"] == "connected"
    return ws, hello["data"]["id"]


def request(ws, event, data=None, ack=None):
    frame = {"type": event, "data": data or {}}
    if ack is not None:
        frame["ack"] = ack
    ws.send_json(frame)


def test_http_create_and_inspect_room(client):
    resp = client.post("/rooms")
    assert resp.status_code == 200
    room_id = resp.json()["room"]

    summary = client.get(f"/rooms/{room_id}").json()
    assert summary == {"room": room_id, "hostId": None, "guestId": None, "viewerId": None, "lobbySize": 0}

    assert client.get("/rooms/missing").status_code == 404
    assert client.get("/health").json() == {"status": "ok", "rooms": 1}


def test_missing_page_is_404(client):
    assert client.get("/viewer").status_code == 404


def test_guest_host_admission_flow(client):
    host, host_id = connect(client)
    guest, guest_id = connect(client)
    try:
        request(host, "create-room", ack=1)
        reply = host.receive_json()
        assert reply["type"] == "ack" and reply["ack"] == 1
        room_id = reply["data"]["room"]

        request(guest, "join", {"role": "guest", "room": room_id, "name": "Gina"}, ack="j")
        assert guest.receive_json() == {"type": "ack", "ack": "j", "data": {"status": "waiting"}}

        request(host, "join", {"role": "host", "room": room_id, "name": "Hal"})
        lobby = host.receive_json()
        assert lobby["type"] == "lobby-list"
        assert [e["id"] for e in lobby["data"]] == [guest_id]
        assert host.receive_json() == {"type": "ack", "ack": None, "data": {"ok": True}}

        request(host, "host-accept-guest", {"room": room_id, "guestId": guest_id})
        assert guest.receive_json() == {"type": "accepted", "data": {"room": room_id, "hostId": host_id}}
        assert host.receive_json() == {"type": "guest-accepted", "data": {"guestId": guest_id}}
        assert host.receive_json() == {"type": "lobby-list", "data": []}

        request(guest, "signal", {"to": host_id, "type": "offer", "data": {"sdp": "v=0"}})
        assert host.receive_json() == {
            "type": "signal",
            "data": {"from": guest_id, "type": "offer", "data": {"sdp": "v=0"}},
        }

        summary = client.get(f"/rooms/{room_id}").json()
        assert summary["hostId"] == host_id
        assert summary["guestId"] == guest_id
        assert summary["lobbySize"] == 0
    finally:
        guest.__exit__(None, None, None)
        host.__exit__(None, None, None)


def test_join_unknown_room(client):
    ws, _ = connect(client)
    try:
        request(ws, "join", {"role": "viewer", "room": "nope"}, ack=7)
        assert ws.receive_json() == {"type": "ack", "ack": 7, "data": {"error": "room-not-found"}}
    finally:
        ws.__exit__(None, None, None)


def test_malformed_frames_keep_connection_open(client):
    ws, _ = connect(client)
    try:
        ws.send_text("not json")
        assert ws.receive_json() == {"type": "error", "data": {"reason": "invalid-event"}}

        request(ws, "no-such-event")
        assert ws.receive_json()["type"] == "error"

        request(ws, "join", {"role": "admin", "room": "x"})
        assert ws.receive_json()["type"] == "error"

        request(ws, "create-room", ack="still-alive")
        assert ws.receive_json()["ack"] == "still-alive"
    finally:
        ws.__exit__(None, None, None)


def test_binary_frame_keeps_host_and_room(client):
    room_id = client.post("/rooms").json()["room"]
    host, _ = connect(client)
    try:
        request(host, "join", {"role": "host", "room": room_id})
        host.receive_json()  # lobby-list
        host.receive_json()  # ack

        host.send_bytes(b"\x00\x01")
        assert host.receive_json() == {"type": "error", "data": {"reason": "invalid-event"}}
        assert client.get(f"/rooms/{room_id}").status_code == 200

        request(host, "create-room", ack="after-bytes")
        assert host.receive_json()["ack"] == "after-bytes"
    finally:
        host.__exit__(None, None, None)


def test_deeply_nested_json_is_rejected(client):
    ws, _ = connect(client)
    try:
        ws.send_text("[" * 100000 + "]" * 100000)
        assert ws.receive_json() == {"type": "error", "data": {"reason": "invalid-event"}}
    finally:
        ws.__exit__(None, None, None)


def test_scalar_mute_payload_reaches_target(client):
    room_id = client.post("/rooms").json()["room"]
    host, _ = connect(client)
    guest, guest_id = connect(client)
    try:
        request(host, "join", {"role": "host", "room": room_id})
        host.receive_json()  # lobby-list
        host.receive_json()  # ack
        request(guest, "join", {"role": "guest", "room": room_id})
        guest.receive_json()  # ack

        request(host, "host-command", {"room": room_id, "cmd": "mute", "target": guest_id, "payload": True})
        assert guest.receive_json() == {"type": "mute", "data": True}
    finally:
        guest.__exit__(None, None, None)
        host.__exit__(None, None, None)


def test_host_disconnect_notifies_guest_and_viewer(client):
    room_id = client.post("/rooms").json()["room"]
    host, host_id = connect(client)
    guest, guest_id = connect(client)
    viewer, viewer_id = connect(client)
    try:
        request(host, "join", {"role": "host", "room": room_id})
        host.receive_json()  # lobby-list
        host.receive_json()  # ack

        request(guest, "join", {"role": "guest", "room": room_id})
        guest.receive_json()  # ack
        host.receive_json()  # lobby-list

        request(viewer, "join", {"role": "viewer", "room": room_id})
        viewer.receive_json()  # ack
        assert host.receive_json() == {"type": "viewer-ready", "data": {"viewerId": viewer_id}}

        request(host, "host-accept-guest", {"room": room_id, "guestId": guest_id})
        guest.receive_json()  # accepted

        request(host, "host-command", {"room": room_id, "cmd": "start-forward"})
        assert viewer.receive_json() == {"type": "prepare-viewer", "data": {"room": room_id, "hostId": host_id}}

        host.__exit__(None, None, None)

        assert guest.receive_json() == {"type": "host-left", "data": {}}
        assert viewer.receive_json() == {"type": "host-left", "data": {}}
        assert client.get(f"/rooms/{room_id}").status_code == 404
    finally:
        guest.__exit__(None, None, None)
        viewer.__exit__(None, None, None)
