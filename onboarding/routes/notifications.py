"""
Notification routes - snapshot, read state and the live admin feed
"""
import asyncio
import logging
from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from onboarding.dependencies import ChannelFactory, get_api_client, get_channel_factory
from onboarding.services.api_client import OnboardingApiClient
from onboarding.services.notification_reconciler import NotificationReconciler
from onboarding.utils.exceptions import OnboardingError
from onboarding.utils.helpers import serialize_models

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["Notifications"])
ws_router = APIRouter(tags=["Notifications"])

def render_state(reconciler: NotificationReconciler) -> dict:
    return {
        "type": "state",
        "status": reconciler.status.value,
        "unread_count": reconciler.unread_count,
        "parse_failures": reconciler.parse_failures,
        "notifications": serialize_models(reconciler.notifications),
    }

@router.get("/")
async def get_notifications(api: OnboardingApiClient = Depends(get_api_client)):
    """Get all notifications, newest first"""
    reconciler = NotificationReconciler(api)
    await reconciler.load_snapshot()
    return render_state(reconciler)

@router.post("/mark-all-read")
async def mark_all_read(api: OnboardingApiClient = Depends(get_api_client)):
    """Mark every notification as read and return the refreshed list"""
    reconciler = NotificationReconciler(api)
    await reconciler.mark_all_read()
    return render_state(reconciler)

@router.post("/{notification_id}/read")
async def mark_read(notification_id: int, api: OnboardingApiClient = Depends(get_api_client)):
    """Mark one notification as read and return the updated list"""
    reconciler = NotificationReconciler(api)
    await reconciler.load_snapshot()
    await reconciler.mark_read(notification_id)
    return render_state(reconciler)

# ─── Live feed ────────────────────────────────────────────────────────────────

COMMANDS = {"refresh", "mark_all_read"}

@ws_router.websocket("/ws/notifications")
async def notifications_feed(
    websocket: WebSocket,
    api: OnboardingApiClient = Depends(get_api_client),
    channel_factory: ChannelFactory = Depends(get_channel_factory)
):
    """Push the reconciled notification list to one admin view"""
    await websocket.accept()
    updates: asyncio.Queue = asyncio.Queue()
    reconciler = NotificationReconciler(
        api,
        channel_factory(),
        on_change=lambda r: updates.put_nowait(render_state(r)),
    )

    async def pump():
        while True:
            await websocket.send_json(await updates.get())

    sender = asyncio.create_task(pump())
    try:
        try:
            await reconciler.load_snapshot()
        except OnboardingError as exc:
            updates.put_nowait({"type": "error", "detail": exc.message, "retryable": exc.retryable})

        async with reconciler:
            while True:
                command = (await websocket.receive_text()).strip()
                if command not in COMMANDS:
                    updates.put_nowait({"type": "error", "detail": f"Unknown command: {command}"})
                    continue
                try:
                    if command == "refresh":
                        await reconciler.refresh()
                    else:
                        await reconciler.mark_all_read()
                except OnboardingError as exc:
                    updates.put_nowait({"type": "error", "detail": exc.message, "retryable": exc.retryable})
    except WebSocketDisconnect:
        logger.info("Notification view disconnected")
    finally:
        await reconciler.close()
        sender.cancel()
        await asyncio.gather(sender, return_exceptions=True)
