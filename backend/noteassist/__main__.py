"""Run the API with uvicorn: `python -m noteassist`."""

import uvicorn

from noteassist.config import settings


def main() -> None:
    uvicorn.run(
        "noteassist.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
