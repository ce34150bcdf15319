"""
Database change feed.

Subscribes to Supabase Realtime postgres_changes for the chat tables and
tells connected clients which list to refetch. Group messages and profiles
are visible to every user; a direct message change only reaches its sender
and receiver.
"""

import asyncio
import logging
from typing import Any, Dict, Optional, Set

from supabase import acreate_client, AsyncClient

from app.config import settings
from app.modules.realtime.manager import ConnectionManager, manager

logger = logging.getLogger(__name__)

WATCHED_TABLES = ("messages", "direct_messages", "profiles")


def parse_change(payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Normalize a postgres_changes payload to {table, event, record}"""
    data = payload.get("data", payload)
    table = data.get("table")
    event = data.get("type") or data.get("eventType")
    if table not in WATCHED_TABLES or not event:
        return None
    record = data.get("record") or data.get("new") or data.get("old_record") or data.get("old") or {}
    return {"table": table, "event": str(event).upper(), "record": record}


def recipients_for(change: Dict[str, Any]) -> Optional[Set[str]]:
    """None means every connected user"""
    if change["table"] != "direct_messages":
        return None
    record = change["record"]
    participants = {uid for uid in (record.get("sender_id"), record.get("receiver_id")) if uid}
    # Without full replica identity an old record holds only the key; the
    # notification carries no row data, so everyone may refetch
    return participants or None


def refetch_message(change: Dict[str, Any]) -> Dict[str, Any]:
    return {"type": "refetch", "table": change["table"], "event": change["event"]}


class ChangeFeed:
    def __init__(self, connections: ConnectionManager):
        self.connections = connections
        self._client: Optional[AsyncClient] = None
        self._pending: Set[asyncio.Task] = set()

    async def start(self):
        # Service role: the feed must see every user's direct messages to route them
        key = settings.supabase_service_role_key or settings.supabase_key
        self._client = await acreate_client(settings.supabase_url, key)
        channel = self._client.channel("db-changes")
        for table in WATCHED_TABLES:
            channel.on_postgres_changes(
                event="*", schema="public", table=table, callback=self._on_change
            )
        await channel.subscribe()
        logger.info(f"Realtime change feed subscribed to {', '.join(WATCHED_TABLES)}")

    async def stop(self):
        if self._client is not None:
            await self._client.remove_all_channels()
            self._client = None

    def _on_change(self, payload: Dict[str, Any]):
        change = parse_change(payload)
        if change is None:
            return
        task = asyncio.ensure_future(self.dispatch(change))
        self._pending.add(task)
        task.add_done_callback(self._dispatched)

    def _dispatched(self, task: asyncio.Task):
        self._pending.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error(f"Change notification failed: {task.exception()}")

    async def dispatch(self, change: Dict[str, Any]):
        logger.debug(f"{change['event']} on {change['table']}")
        await self.connections.notify(refetch_message(change), recipients_for(change))


feed = ChangeFeed(manager)
