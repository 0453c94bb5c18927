import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import FastAPI, Request

from pot_api import __version__
from pot_api.queues.facade import create_queue
from pot_api.router import router
from pot_api.services.runner import JobRunner
from pot_api.services.verifier import HttpVerifier, Verifier
from pot_api.settings import Settings
from pot_api.webhook import WebhookClient

logger = logging.getLogger("pot_api")


def create_app(
    settings: Optional[Settings] = None,
    verifier: Optional[Verifier] = None,
    webhooks: Optional[WebhookClient] = None,
) -> FastAPI:
    """Build the application.

    Collaborators not passed in are built from ``settings`` when the app starts.
    """
    settings = settings or Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> Any:
        queue = create_queue(settings)
        await queue.start()

        engine: Verifier
        owned_engine: Optional[HttpVerifier] = None
        if verifier is None:
            owned_engine = HttpVerifier.from_url(settings.engine_url)
            engine = owned_engine
            logger.info(f"POT_ENGINE_URL: {settings.engine_url}")
        else:
            engine = verifier

        app.state.settings = settings
        app.state.queue = queue
        app.state.verifier = engine
        app.state.runner = JobRunner(
            queue,
            engine,
            webhooks or WebhookClient(timeout=settings.webhook_timeout),
            max_concurrent_jobs=settings.max_concurrent_jobs,
        )

        yield

        await app.state.runner.drain(settings.shutdown_grace_seconds)
        await queue.close()
        if owned_engine is not None:
            await owned_engine.aclose()
        logger.info("Application shutdown completed")

    app = FastAPI(
        title="pot-api",
        description="Proof-of-thought verification over HTTP",
        version=__version__,
        lifespan=lifespan,
    )
    app.include_router(router)

    @app.get("/")
    async def index() -> dict[str, str]:
        return {"name": "pot-api", "version": __version__, "status": "ok"}

    @app.get("/health")
    async def health_check(request: Request) -> dict[str, str]:
        return {"status": "ok", "backend": request.app.state.queue.backend_name}

    return app


app = create_app()
