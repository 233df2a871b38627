import os

import uvicorn

from utils.logging_utils import get_tagged_logger, setup_logging

logger = get_tagged_logger(__name__, tag="server")


if __name__ == "__main__":
    setup_logging(level=os.getenv("WXDASH_LOG_LEVEL", "INFO"), service="weather_dashboard")
    port = int(os.getenv("PORT", 8000))
    logger.info("Starting weather dashboard", extra={"port": port})

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=port,
        reload=False,
    )
