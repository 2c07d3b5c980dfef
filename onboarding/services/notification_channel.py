"""
Live notification channel
WebSocket connection to the backend's notification endpoint. The connection
is only open inside `async with channel:`; leaving the block closes it on
every path, errors included.
"""
import asyncio
import logging
from typing import AsyncIterator, Optional, Union

import websockets

from onboarding.config.settings import settings
from onboarding.utils.exceptions import ChannelError

logger = logging.getLogger(__name__)


class NotificationChannel:
    """One scoped WebSocket subscription to the notification stream."""

    def __init__(self, url: Optional[str] = None, open_timeout: Optional[float] = None):
        self.url = url or settings.notifications_ws_url
        self.open_timeout = open_timeout if open_timeout is not None else settings.WS_OPEN_TIMEOUT
        self._ws = None

    @property
    def is_open(self) -> bool:
        return self._ws is not None

    async def __aenter__(self) -> "NotificationChannel":
        if self._ws is not None:
            raise ChannelError("Channel is already open")
        try:
            self._ws = await websockets.connect(self.url, open_timeout=self.open_timeout)
        except (OSError, asyncio.TimeoutError, websockets.exceptions.WebSocketException) as exc:
            logger.warning("Could not open notification channel %s: %s", self.url, exc)
            raise ChannelError(f"Could not connect to {self.url}: {exc}") from exc
        logger.info("Notification channel open: %s", self.url)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        ws, self._ws = self._ws, None
        if ws is not None:
            await ws.close()
            logger.info("Notification channel closed: %s", self.url)

    def __aiter__(self) -> AsyncIterator[Union[str, bytes]]:
        return self._messages()

    async def _messages(self) -> AsyncIterator[Union[str, bytes]]:
        if self._ws is None:
            raise ChannelError("Channel is not open")
        try:
            async for message in self._ws:
                yield message
        except websockets.exceptions.ConnectionClosedError as exc:
            raise ChannelError(f"Notification channel dropped: {exc}") from exc
