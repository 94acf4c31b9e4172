"""
Fan-out of the "update" signal to every connected WebSocket client.

Delivery is fire-and-forget: no acknowledgements, no ordering, and a client
that fails to receive the message never blocks the others.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Set

logger = logging.getLogger(__name__)

UPDATE_MESSAGE: Dict[str, str] = {"event": "update"}


class BroadcastChannel:
    def __init__(self) -> None:
        self._clients: Set[Any] = set()

    @property
    def client_count(self) -> int:
        return len(self._clients)

    def connect(self, client: Any) -> None:
        self._clients.add(client)
        logger.info("[ws] client connected (%d open)", len(self._clients))

    def disconnect(self, client: Any) -> None:
        self._clients.discard(client)
        logger.info("[ws] client disconnected (%d open)", len(self._clients))

    async def _send(self, client: Any) -> bool:
        try:
            await client.send_json(UPDATE_MESSAGE)
            return True
        except Exception as e:
            logger.warning("[ws] failed to notify client: %s", e)
            return False

    async def broadcast_changed(self) -> int:
        """Send the update signal to every open client; returns how many received it."""
        clients = list(self._clients)
        if not clients:
            return 0
        results = await asyncio.gather(*(self._send(c) for c in clients))
        delivered = sum(1 for ok in results if ok)
        logger.info("[ws] update sent to %d/%d clients", delivered, len(clients))
        return delivered
