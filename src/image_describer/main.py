"""Run the API with uvicorn on the configured host and port."""

import uvicorn

from image_describer.api.app import create_app
from image_describer.config import Settings
from image_describer.containers import build_container


def main() -> None:
    """Build the app from environment settings and serve it."""
    settings = Settings()
    app = create_app(build_container(settings))
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
