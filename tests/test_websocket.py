"""
Tests for the planner live-update socket
"""

import pytest
from starlette.websockets import WebSocketDisconnect

from weddingplanner.services.auth_service import AuthService

from conftest import make_event

def test_socket_requires_token(client, sample_event):
    with pytest.raises(WebSocketDisconnect) as exc:
        with client.websocket_connect(f"/ws/events/{sample_event.id}?token=bad"):
            pass
    assert exc.value.code == 4001

def test_socket_rejects_other_planners(client, db_session, auth_headers):
    other, _ = AuthService.register(db_session, "other", "s3cret-pass", "Olga", "olga@wedmail.org")
    foreign = make_event(db_session, other)
    token = auth_headers["Authorization"].split()[1]

    with pytest.raises(WebSocketDisconnect) as exc:
        with client.websocket_connect(f"/ws/events/{foreign.id}?token={token}"):
            pass
    assert exc.value.code == 4003

def test_socket_welcome_and_heartbeat(client, sample_event, auth_headers):
    token = auth_headers["Authorization"].split()[1]

    with client.websocket_connect(f"/ws/events/{sample_event.id}?token={token}") as websocket:
        welcome = websocket.receive_json()
        assert welcome["type"] == "connection"
        assert welcome["connection_count"] == 1

        websocket.send_json({"type": "ping", "timestamp": 42})
        assert websocket.receive_json() == {"type": "pong", "timestamp": 42}

def test_socket_unknown_event(client, auth_headers):
    token = auth_headers["Authorization"].split()[1]

    with pytest.raises(WebSocketDisconnect) as exc:
        with client.websocket_connect(f"/ws/events/999?token={token}"):
            pass
    assert exc.value.code == 4004

def test_stats_are_admin_only(client, db_session, auth_headers):
    assert client.get("/ws/stats").status_code == 401
    assert client.get("/ws/stats", headers=auth_headers).status_code == 403

    admin, _ = AuthService.register(db_session, "root", "s3cret-pass", "Root", "root@wedmail.org", role="admin")
    token = AuthService.issue_token(db_session, admin)
    response = client.get("/ws/stats", headers={"Authorization": f"Bearer {token.token}"})
    assert response.status_code == 200
    assert response.json()["total_connections"] == 0
