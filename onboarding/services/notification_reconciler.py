"""
Notification stream reconciler
Keeps one admin view's notification list current by merging an authoritative
snapshot (REST) with live events (WebSocket).

- The set is newest-first. Live events are prepended in arrival order.
- Events sharing a non-null id are collapsed; the first one seen wins.
  Events without an id are never collapsed.
- A snapshot replaces the whole set, in the snapshot's own order.
- Read flags only move from unread to read, in place.
"""
import asyncio
import json
import logging
from collections import deque
from typing import Any, Callable, Deque, Dict, List, Optional

from pydantic import ValidationError

from onboarding.models.notification import ConnectionStatus, NotificationEvent
from onboarding.services.api_client import OnboardingApiClient
from onboarding.services.notification_channel import NotificationChannel
from onboarding.utils.exceptions import ChannelError, ParseError

logger = logging.getLogger(__name__)

ChangeListener = Callable[["NotificationReconciler"], Any]


def parse_live_event(raw: Any) -> NotificationEvent:
    """Decode one pushed message. Raises ParseError on anything malformed."""
    try:
        if isinstance(raw, (bytes, bytearray)):
            raw = raw.decode("utf-8")
        data = json.loads(raw) if isinstance(raw, str) else raw
        if not isinstance(data, dict):
            raise ParseError(f"Expected a JSON object, got {type(data).__name__}")
        return NotificationEvent.model_validate(data)
    except (UnicodeDecodeError, ValueError, RecursionError, ValidationError) as exc:
        raise ParseError(f"Malformed notification event: {exc}") from exc


class NotificationReconciler:
    """Owns one notification set and the live channel feeding it."""

    def __init__(
        self,
        api: OnboardingApiClient,
        channel: Optional[NotificationChannel] = None,
        on_change: Optional[ChangeListener] = None,
    ):
        self.api = api
        self.channel = channel
        self.on_change = on_change
        self.status = ConnectionStatus.DISCONNECTED
        self.parse_failures = 0
        self.last_error: Optional[Exception] = None
        self._order: Deque[NotificationEvent] = deque()
        self._by_id: Dict[int, NotificationEvent] = {}
        self._listener: Optional[asyncio.Task] = None
        self._closed = False

    # ─── Views ──────────────────────────────────────────────────────────

    @property
    def notifications(self) -> List[NotificationEvent]:
        return list(self._order)

    @property
    def unread_count(self) -> int:
        return sum(1 for n in self._order if not n.is_read)

    @property
    def is_closed(self) -> bool:
        return self._closed

    def __len__(self) -> int:
        return len(self._order)

    # ─── Merge ──────────────────────────────────────────────────────────

    def replace(self, events: List[NotificationEvent]) -> None:
        self._order = deque(events)
        self._by_id = {}
        for event in events:
            if event.id is not None:
                self._by_id.setdefault(event.id, event)
        self._notify()

    def merge(self, event: NotificationEvent) -> bool:
        """Prepend `event` unless its id is already held."""
        if event.id is not None:
            if event.id in self._by_id:
                return False
            self._by_id[event.id] = event
        self._order.appendleft(event)
        self._notify()
        return True

    def on_live_event(self, raw: Any) -> Optional[NotificationEvent]:
        if self._closed:
            return None
        try:
            event = parse_live_event(raw)
        except ParseError as exc:
            self.parse_failures += 1
            logger.warning("Dropped live notification: %s", exc)
            return None
        if not self.merge(event):
            logger.debug("Duplicate live notification %s ignored", event.id)
            return None
        return event

    # ─── Snapshot ───────────────────────────────────────────────────────

    async def load_snapshot(self) -> List[NotificationEvent]:
        snapshot = await self.api.list_notifications()
        if self._closed:
            return snapshot
        self.replace(snapshot)
        return self.notifications

    async def refresh(self) -> List[NotificationEvent]:
        return await self.load_snapshot()

    async def mark_all_read(self) -> List[NotificationEvent]:
        current = await self.api.list_notifications()
        # Items already read need no PATCH; the re-fetch below shows every flag as read
        pending = [n.id for n in current if n.id is not None and not n.is_read]
        if pending:
            await asyncio.gather(*(self.api.mark_notification_read(nid) for nid in pending))
        logger.info("Marked %d notification(s) as read", len(pending))
        return await self.load_snapshot()

    async def mark_read(self, notification_id: int) -> None:
        await self.api.mark_notification_read(notification_id)
        event = self._by_id.get(notification_id)
        if event is not None and not event.is_read:
            event.is_read = True
            self._notify()

    # ─── Live channel ───────────────────────────────────────────────────

    async def connect(self) -> None:
        if self._closed:
            raise ChannelError("Reconciler is closed")
        if self.channel is None:
            raise ChannelError("No live channel configured")
        if self._listener is not None and not self._listener.done():
            return
        self._set_status(ConnectionStatus.CONNECTING)
        self._listener = asyncio.create_task(self._listen())

    async def disconnect(self) -> None:
        listener, self._listener = self._listener, None
        if listener is not None and not listener.done():
            listener.cancel()
            try:
                await listener
            except asyncio.CancelledError:
                pass
        if self.status in (ConnectionStatus.CONNECTING, ConnectionStatus.CONNECTED):
            self._set_status(ConnectionStatus.DISCONNECTED)

    async def reconnect(self) -> None:
        await self.disconnect()
        await self.connect()

    async def wait_closed(self) -> None:
        """Wait until the live channel ends on its own."""
        if self._listener is not None:
            await asyncio.shield(self._listener)

    async def close(self) -> None:
        await self.disconnect()
        self._closed = True

    async def __aenter__(self) -> "NotificationReconciler":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def _listen(self) -> None:
        try:
            async with self.channel as channel:
                self._set_status(ConnectionStatus.CONNECTED)
                async for raw in channel:
                    self.on_live_event(raw)
        except ChannelError as exc:
            logger.warning("Notification channel error: %s", exc)
            self.last_error = exc
            self._set_status(ConnectionStatus.ERROR)
            return
        except Exception as exc:
            logger.exception("Notification listener failed")
            self.last_error = exc
            self._set_status(ConnectionStatus.ERROR)
            return
        self._set_status(ConnectionStatus.DISCONNECTED)

    # ─── Internals ──────────────────────────────────────────────────────

    def _set_status(self, status: ConnectionStatus) -> None:
        if status == self.status:
            return
        self.status = status
        self._notify()

    def _notify(self) -> None:
        if self.on_change is None:
            return
        try:
            self.on_change(self)
        except Exception:
            logger.exception("Notification change listener failed")
