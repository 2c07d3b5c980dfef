"""
Application settings and configuration
"""
import os
from urllib.parse import urlsplit
from dotenv import load_dotenv

load_dotenv()

class Settings:
    # Application
    APP_NAME = "Onboarding Portal"
    VERSION = "2.0.0"
    DEBUG = os.getenv("DEBUG", "True") == "True"
    HOST = os.getenv("HOST", "0.0.0.0")
    PORT = int(os.getenv("PORT", "8080"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Upstream onboarding backend
    API_BASE_URL = os.getenv("API_BASE_URL", "http://127.0.0.1:8000/api")
    NOTIFICATIONS_WS_PATH = os.getenv("NOTIFICATIONS_WS_PATH", "/ws/notifications/")
    HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "30"))
    WS_OPEN_TIMEOUT = float(os.getenv("WS_OPEN_TIMEOUT", "10"))

    # CORS
    ALLOWED_ORIGINS = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    # Timestamps shown to administrators
    DISPLAY_TIMEZONE = os.getenv("DISPLAY_TIMEZONE", "Africa/Nairobi")

    # Pagination
    DEFAULT_PAGE_SIZE = 20
    MAX_PAGE_SIZE = 100

    @property
    def notifications_ws_url(self) -> str:
        """Push channel URL on the same host as the REST API."""
        api_url = urlsplit(self.API_BASE_URL)
        scheme = "wss" if api_url.scheme == "https" else "ws"
        return f"{scheme}://{api_url.netloc}{self.NOTIFICATIONS_WS_PATH}"

settings = Settings()
