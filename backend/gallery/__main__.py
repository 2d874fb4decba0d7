"""Run the gallery server with uvicorn: ``python -m gallery``."""
import uvicorn

from gallery.config import get_config


def main() -> None:
    config = get_config()
    uvicorn.run(
        "gallery.main:app",
        host=config.server.host,
        port=config.server.port,
        log_level=config.logging.level,
    )


if __name__ == "__main__":
    main()
