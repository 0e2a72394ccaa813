import json

from channels.generic.websocket import AsyncWebsocketConsumer

from ..services.broadcast import UPDATES_GROUP


class UpdatesConsumer(AsyncWebsocketConsumer):
    """Pushes ``broadcast.refresh`` events so dashboards reload instead of polling."""
    GROUP = UPDATES_GROUP

    async def connect(self):
        await self.channel_layer.group_add(self.GROUP, self.channel_name)
        await self.accept()
        await self.send(json.dumps({"type": "welcome", "message": "connected"}))

    async def disconnect(self, close_code):
        await self.channel_layer.group_discard(self.GROUP, self.channel_name)

    async def broadcast_refresh(self, event):
        # event: {"type": "broadcast.refresh", "version": int, "ts": "...", "keys": ["beds", ...]}
        await self.send(json.dumps(event))
