"""
FastAPI dependencies shared by the portal routes
"""
from typing import Callable

from fastapi.requests import HTTPConnection

from onboarding.services.api_client import OnboardingApiClient
from onboarding.services.notification_channel import NotificationChannel

ChannelFactory = Callable[[], NotificationChannel]

def get_api_client(conn: HTTPConnection) -> OnboardingApiClient:
    """Backend client created in the app lifespan"""
    return conn.app.state.api_client

def get_channel_factory() -> ChannelFactory:
    """Each notification view opens its own channel"""
    return NotificationChannel
