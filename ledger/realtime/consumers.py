import json
from channels.generic.websocket import AsyncWebsocketConsumer
from django.contrib.auth.models import AnonymousUser

from ledger.guards import is_administrator
from ledger.services.audit import EVENTS_GROUP


class LedgerEventsConsumer(AsyncWebsocketConsumer):
    """Stream committed audit events to the administrator's indexer.

    Events carry registration payloads, so only the ledger
    administrator may subscribe.  Close codes: 4001 unauthenticated,
    4003 not the administrator.
    """
    GROUP = EVENTS_GROUP

    async def connect(self):
        user = self.scope.get("user") or AnonymousUser()
        if not getattr(user, "is_authenticated", False):
            await self.close(code=4001)
            return
        if not is_administrator(getattr(user, "wallet", None)):
            await self.close(code=4003)
            return
        await self.channel_layer.group_add(self.GROUP, self.channel_name)
        await self.accept()
        await self.send(json.dumps({"type": "welcome", "message": "connected"}))

    async def disconnect(self, close_code):
        await self.channel_layer.group_discard(self.GROUP, self.channel_name)

    async def ledger_event(self, event):
        # event: {"type": "ledger.event", "event": {"sequence": int, "kind": "...", ...}}
        await self.send(json.dumps(event["event"]))
