"""Run the API server: ``python -m feedback_collector``."""

import uvicorn

from feedback_collector.config import load_settings
from feedback_collector.main import create_app


def main() -> None:
    settings = load_settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
