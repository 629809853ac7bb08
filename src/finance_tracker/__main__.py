import uvicorn

from finance_tracker.config import settings


def main() -> None:
    uvicorn.run(
        "finance_tracker.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
