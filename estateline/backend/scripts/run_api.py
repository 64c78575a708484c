from __future__ import annotations

import logging

import uvicorn

from app.config import settings


def _quiet_logging() -> None:
    # Root defaults
    logging.basicConfig(
        level=logging.INFO,
        format="%(levelname)s:%(name)s:%(message)s",
    )

    # Quiet the usual offenders
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.error").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def main() -> None:
    _quiet_logging()
    if not settings.ESTATE_API_KEY:
        logging.getLogger(__name__).warning("ESTATE_API_KEY is not set; /tools/route_call will fail")

    logging.getLogger(__name__).info("listening on :%d", settings.PORT)
    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.PORT, log_config=None)


if __name__ == "__main__":
    main()
