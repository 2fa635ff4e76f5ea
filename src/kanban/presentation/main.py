import logging

import uvicorn

from src.kanban.presentation.app import create_app
from src.setup.api_config import ApiSettings
from src.setup.app_config import configure_di

settings = ApiSettings()

logging.basicConfig(level=settings.LOG_LEVEL)

# Configure DI once at process start
configure_di()

app = create_app(settings)


def run() -> None:
    """Serve ``app`` with uvicorn on the configured host and port."""
    uvicorn.run(
        app,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
