import uvicorn

from toolhub.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "toolhub.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,  # init_logging owns the root handler
    )


if __name__ == "__main__":
    main()
