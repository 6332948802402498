import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.database import Base, engine

# Import all models so they are registered with Base.metadata before create_all
import app.models  # noqa: F401

from app.api.responses import error_body
from app.api.routes import (
    app_routes,
    auth,
    shipments,
    products,
    suppliers,
    alerts,
    analytics,
    simulations,
    events,
    vulnerabilities,
    company,
    supply_chain,
    uploads,
)
from app.core.event_intelligence import EventStore

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)
# Suppress SQL echo/logging (engine already has echo=False)
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        Base.metadata.create_all(bind=engine)
    except Exception as e:
        logger.warning(
            "Database not available (tables not created): %s. "
            "Set DATABASE_URL or db_* env vars and ensure PostgreSQL is running.",
            e,
        )
    app.state.event_store = EventStore.with_demo_events()
    if settings.seed_demo_data:
        try:
            from app.seed import seed_all_if_empty

            if seed_all_if_empty():
                logger.info("Seeded demo user and supply chain data")
        except Exception as e:
            logger.warning("Seed skipped (non-fatal): %s", e)
    yield


app = FastAPI(
    title="Supply Chain Risk Monitor API",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url, "http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    first = exc.errors()[0]
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = first.get("msg", "Invalid request")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(f"{field}: {message}" if field else message),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Internal server error"),
    )


app.include_router(app_routes.router)
app.include_router(auth.router)
app.include_router(shipments.router)
app.include_router(products.router)
app.include_router(suppliers.router)
app.include_router(alerts.router)
app.include_router(analytics.router)
app.include_router(simulations.router)
app.include_router(events.router)
app.include_router(vulnerabilities.router)
app.include_router(company.router)
app.include_router(supply_chain.router)
app.include_router(uploads.router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.env == "development",
    )
