import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from customer_manager.core.config import CORS_ORIGINS, ENV, HOST, PORT
from customer_manager.core.database import engine
from customer_manager.core.errors import register_exception_handlers
from customer_manager.core.logging_setup import LOG_LEVEL, configure_logging
from customer_manager.core.startup_checks import ensure_schema, validate_database_environment
from customer_manager.middleware.observability import ObservabilityMiddleware
import customer_manager.models  # registers the models before create_all

from customer_manager.routers.addresses import customer_addresses_router, router as addresses_router
from customer_manager.routers.customers import router as customers_router
from customer_manager.routers.meta import router as meta_router

configure_logging()

logger = logging.getLogger(__name__)
STARTUP_PREFIX = "[STARTUP]"


@asynccontextmanager
async def lifespan(_: FastAPI):
    _startup_tasks()
    yield


app = FastAPI(
    title="Customer Manager API",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
)
app.add_middleware(ObservabilityMiddleware)

register_exception_handlers(app)


def _startup_tasks() -> None:
    try:
        validate_database_environment()
        ensure_schema(engine=engine)
        logger.info("%s ready env=%s", STARTUP_PREFIX, ENV)
    except Exception:
        logger.exception("%s ERROR startup failed", STARTUP_PREFIX)
        raise


# Routers
app.include_router(customers_router)
app.include_router(customer_addresses_router)
app.include_router(addresses_router)
app.include_router(meta_router)


@app.get("/")
def root():
    return {"status": "ok"}


@app.get("/health")
def health():
    return {"status": "healthy"}


def serve() -> None:
    import uvicorn

    uvicorn.run(app, host=HOST, port=PORT, log_level=LOG_LEVEL.lower(), log_config=None)


if __name__ == "__main__":
    serve()
