import logging
import uvicorn
import os
import sys

# Ensure usage of the current directory for imports
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from onboarding.config.settings import settings

if __name__ == "__main__":
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    print(f"🚀 Starting {settings.APP_NAME}...")
    uvicorn.run("onboarding.main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)
