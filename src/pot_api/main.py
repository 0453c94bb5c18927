import argparse
import logging
from typing import Optional, Sequence

from pot_api.settings import Settings

logger = logging.getLogger("pot_api")

ROUTES = (
    ("POST /verify", "sync verification"),
    ("POST /verify/async", "async + webhook"),
    ("GET  /jobs/{id}", "poll status"),
)


def serve(settings: Settings) -> None:
    import uvicorn

    log_level = settings.log_level.upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    logger.info("pot-api listening on http://%s:%d", settings.host, settings.port)
    for route, purpose in ROUTES:
        logger.info("  %-20s %s", route, purpose)

    uvicorn.run(
        "pot_api.app:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=log_level.lower(),
    )


def main(argv: Optional[Sequence[str]] = None) -> None:
    settings = Settings()
    parser = argparse.ArgumentParser(prog="pot-api", description="Serve proof-of-thought verification over HTTP")
    parser.add_argument("--host", "-H", default=settings.host, help="Server host")
    parser.add_argument("--port", "-p", type=int, default=settings.port, help="Server port (env: PORT)")
    parser.add_argument("--log-level", "-l", default=settings.log_level, help="Logging level")

    args = parser.parse_args(argv)
    serve(settings.model_copy(update={"host": args.host, "port": args.port, "log_level": args.log_level}))


if __name__ == "__main__":
    main()
