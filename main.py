"""Launch the aviation map FastAPI server."""

import logging

import uvicorn

from aviation_map.config import get_settings


def main():
    settings = get_settings()
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    uvicorn.run("aviation_map.server:app", host=settings.host, port=settings.port, reload=settings.reload)


if __name__ == "__main__":
    main()
