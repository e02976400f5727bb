"""
WebSocket manager for live planner dashboard updates
"""

import json
import logging
from typing import Dict, List, Optional, Tuple
from fastapi import APIRouter, WebSocket, WebSocketDisconnect, Depends

from weddingplanner.core.db import SessionLocal
from weddingplanner.models import User, WeddingEvent
from weddingplanner.services.auth_service import AuthService
from weddingplanner.utils.security import can_access_event, require_admin

logger = logging.getLogger(__name__)

class WebSocketManager:
    """Manages WebSocket connections for real-time updates"""

    def __init__(self):
        # event_id -> list of websockets
        self.active_connections: Dict[int, List[WebSocket]] = {}

    async def connect(self, websocket: WebSocket, event_id: int):
        """Accept WebSocket connection and add to event room"""
        await websocket.accept()

        if event_id not in self.active_connections:
            self.active_connections[event_id] = []

        self.active_connections[event_id].append(websocket)
        logger.info(f"WebSocket connected to event {event_id}. Total connections: {len(self.active_connections[event_id])}")

    def disconnect(self, websocket: WebSocket, event_id: int):
        """Remove WebSocket connection from event room"""
        connections = self.active_connections.get(event_id)
        if not connections or websocket not in connections:
            return

        connections.remove(websocket)
        logger.info(f"WebSocket disconnected from event {event_id}. Remaining connections: {len(connections)}")

        # Clean up empty rooms
        if not connections:
            del self.active_connections[event_id]

    async def send_personal_message(self, message: dict, websocket: WebSocket):
        """Send message to specific WebSocket"""
        try:
            await websocket.send_text(json.dumps(message, default=str))
        except Exception as e:
            logger.error(f"Error sending personal message: {e}")

    async def broadcast_to_event(self, event_id: int, message: dict):
        """Broadcast message to all WebSockets connected to an event"""
        if event_id not in self.active_connections:
            logger.debug(f"No active connections for event {event_id}")
            return

        # Copy so disconnects during the loop are safe
        connections = self.active_connections[event_id].copy()

        disconnected = []
        for websocket in connections:
            try:
                await websocket.send_text(json.dumps(message, default=str))
            except Exception as e:
                logger.error(f"Error broadcasting to websocket: {e}")
                disconnected.append(websocket)

        for websocket in disconnected:
            self.disconnect(websocket, event_id)

    def get_connection_count(self, event_id: int) -> int:
        return len(self.active_connections.get(event_id, []))

    def get_all_connection_counts(self) -> Dict[int, int]:
        return {
            event_id: len(connections)
            for event_id, connections in self.active_connections.items()
        }

# Global WebSocket manager instance
websocket_manager = WebSocketManager()

router = APIRouter()

def check_access(event_id: int, token: str) -> Tuple[Optional[str], Optional[Tuple[int, str]]]:
    """Event title, or the close code and reason when the socket is refused"""
    db = SessionLocal()
    try:
        user = AuthService.get_user_for_token(db, token) if token else None
        if user is None:
            return None, (4001, "Not authenticated")
        event = db.query(WeddingEvent).filter(WeddingEvent.id == event_id).first()
        if not event:
            return None, (4004, "Event not found")
        if not can_access_event(user, event):
            return None, (4003, "Forbidden")
        return event.title, None
    finally:
        db.close()

@router.websocket("/events/{event_id}")
async def websocket_endpoint(websocket: WebSocket, event_id: int, token: str = ""):
    """Live updates for one event, for its owner or an admin"""
    title, refusal = check_access(event_id, token)
    if refusal:
        code, reason = refusal
        await websocket.close(code=code, reason=reason)
        return

    await websocket_manager.connect(websocket, event_id)

    try:
        welcome_message = {
            "type": "connection",
            "message": f"Connected to event: {title}",
            "event_id": event_id,
            "connection_count": websocket_manager.get_connection_count(event_id)
        }
        await websocket_manager.send_personal_message(welcome_message, websocket)

        while True:
            data = await websocket.receive_text()

            try:
                client_message = json.loads(data)
            except json.JSONDecodeError:
                logger.warning(f"Invalid JSON received from WebSocket: {data}")
                continue

            # Heartbeat
            if isinstance(client_message, dict) and client_message.get("type") == "ping":
                pong_message = {
                    "type": "pong",
                    "timestamp": client_message.get("timestamp")
                }
                await websocket_manager.send_personal_message(pong_message, websocket)

    except WebSocketDisconnect:
        pass
    finally:
        websocket_manager.disconnect(websocket, event_id)

@router.get("/stats")
async def websocket_stats(admin: User = Depends(require_admin)):
    """Connection counts across events"""
    counts = websocket_manager.get_all_connection_counts()
    return {
        "total_events_with_connections": len(counts),
        "connection_counts": counts,
        "total_connections": sum(counts.values())
    }
