from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from typing import Optional
import logging

from hms.config.constants import DOCTOR_SERVICE, PATIENT_SERVICE
from hms.config.settings import settings
from hms.core.events import EventPublisher, create_event_publisher
from hms.core.handlers import register_exception_handlers
from hms.core.middleware import request_logging_middleware
from hms.db.base import create_tables, get_engine, get_session_factory
from hms.db.session import set_global_session_factory
from hms.routes.doctors.router import router as doctor_router
from hms.routes.patients.router import router as patient_router
from hms.routes.schedules.router import router as schedule_router

# -------------------------------------------------------------------------------------
# Logging
# -------------------------------------------------------------------------------------
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

SERVICE_ROUTERS = {
    PATIENT_SERVICE: [patient_router],
    DOCTOR_SERVICE: [doctor_router, schedule_router],
}

SERVICE_TITLES = {
    PATIENT_SERVICE: "HMS Patient Service",
    DOCTOR_SERVICE: "HMS Doctor Service",
}


def build_lifespan(service_name: str, event_publisher: Optional[EventPublisher]):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application start-up & shutdown hooks."""
        # ------------------------------------------------------------------ start‑up -----
        logger.info(f"{service_name} startup …")

        engine = None
        publisher = event_publisher or create_event_publisher(settings)
        try:
            logger.info("Initializing Database Engine...")
            engine = await get_engine(settings.database_url, echo=settings.database_echo)
            app.state.engine = engine
            if settings.database_create_tables:
                await create_tables(engine)
                logger.info("Database tables ensured.")

            session_factory = await get_session_factory(engine)
            app.state.session_factory = session_factory
            set_global_session_factory(session_factory)
            logger.info("DB session factory ready.")

            await publisher.start()
            app.state.event_publisher = publisher
            logger.info(f"Event publisher ready: {type(publisher).__name__}")
        except Exception as e:
            logger.critical(f"CRITICAL ERROR DURING STARTUP INITIALIZATIONS: {e}", exc_info=True)
            if engine:
                await engine.dispose()
                logger.info("Disposed engine after startup failure.")
            raise

        # ------------------------------------------------ give control back
        yield

        # ------------------------------------------------ shutdown --------
        logger.info(f"{service_name} shutdown …")
        try:
            await publisher.stop()
        except Exception:
            logger.exception("Error stopping event publisher")

        try:
            await engine.dispose()
            logger.info("DB engine disposed")
        except Exception:
            logger.exception("Error disposing DB engine")

        logger.info("Shutdown complete")

    return lifespan


def create_app(service_name: str, event_publisher: Optional[EventPublisher] = None) -> FastAPI:
    """
    Build the ASGI app of one microservice.

    `event_publisher` overrides the publisher picked from settings (tests pass
    an InMemoryEventPublisher).
    """
    if service_name not in SERVICE_ROUTERS:
        raise ValueError(f"Unknown service '{service_name}'")

    app = FastAPI(
        title=SERVICE_TITLES[service_name],
        lifespan=build_lifespan(service_name, event_publisher),
    )
    app.state.service_name = service_name

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(o) for o in settings.cors_origins],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(request_logging_middleware)
    register_exception_handlers(app)

    @app.get("/health")
    async def health_check(request: Request):
        return {
            "status": "ok",
            "service": request.app.state.service_name,
            "events": type(getattr(request.app.state, "event_publisher", None)).__name__,
        }

    for router in SERVICE_ROUTERS[service_name]:
        app.include_router(router)
    return app


# uvicorn hms.main:patient_app / uvicorn hms.main:doctor_app
patient_app = create_app(PATIENT_SERVICE)
doctor_app = create_app(DOCTOR_SERVICE)
