"""
Live dashboard broadcasts for planner websockets
"""

from datetime import datetime
from typing import Dict, Optional

from weddingplanner.api.ws import WebSocketManager
from weddingplanner.models import Guest

class NotificationService:
    """Pushes event-scoped updates to connected planners"""

    def __init__(self, websocket_manager: WebSocketManager):
        self.websocket_manager = websocket_manager

    async def _broadcast(self, event_id: int, update_type: str, payload: Optional[Dict] = None):
        message = {
            "type": update_type,
            "event_id": event_id,
            "timestamp": datetime.utcnow().isoformat(),
        }
        if payload:
            message.update(payload)
        await self.websocket_manager.broadcast_to_event(event_id, message)

    async def rsvp_received(self, guest: Guest, stage: int):
        await self._broadcast(guest.event_id, "rsvp_received", {
            "guest": {
                "id": guest.id,
                "name": guest.full_name,
                "rsvp_status": guest.rsvp_status,
                "rsvp_stage": guest.rsvp_stage,
            },
            "stage": stage,
        })

    async def guests_imported(self, event_id: int, count: int):
        await self._broadcast(event_id, "guests_imported", {"count": count})

    async def rooms_assigned(self, event_id: int, assigned: int, unassigned: int):
        await self._broadcast(event_id, "rooms_assigned", {
            "assigned": assigned,
            "unassigned": unassigned,
        })

    async def transport_generated(self, event_id: int, group_count: int):
        await self._broadcast(event_id, "transport_generated", {"group_count": group_count})
