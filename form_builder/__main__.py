"""Run the API server: ``python -m form_builder``."""

import uvicorn

from form_builder.api.main import create_app
from form_builder.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        create_app(settings),
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
