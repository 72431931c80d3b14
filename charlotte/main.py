# charlotte/main.py
from contextlib import asynccontextmanager
import logging

from fastapi.middleware.cors import CORSMiddleware
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from charlotte.core.config import get_settings
from charlotte.core.gateway import GatewayError, SilentWriteError, SupabaseGateway
from charlotte.core.supabase_client import supabase_admin
from charlotte.repositories.pattern_repo import PatternRepository
from charlotte.services.catalog import PatternCatalog

# Routers
from charlotte.routers.users import router as users_router
from charlotte.routers.patterns import router as patterns_router
from charlotte.routers.favorites import router as favorites_router
from charlotte.routers.orders import router as orders_router

settings = get_settings()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Create the catalog snapshot.
      - Preload it when a service-role key is configured; otherwise the
        first catalog request loads it with the caller's token.

    Shutdown:
      - Drop the snapshot.
    """
    catalog = PatternCatalog(PatternRepository())
    app.state.catalog = catalog

    if settings.SUPABASE_SERVICE_ROLE_KEY:
        logger.info("🔄 Startup: preloading catalog from Supabase...")
        try:
            catalog.reload(SupabaseGateway(supabase_admin(), settings.STORAGE_BUCKET))
            logger.info("✅ Startup: catalog loaded (%d patterns).", len(catalog))
        except GatewayError as e:
            # Not fatal: the first request retries the load
            logger.error(f"❌ Startup: catalog preload FAILED: {e.message}")
    yield
    catalog.clear()
    logger.info("Shutdown: catalog released.")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


# --- CORS configuration ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Remote failures ---
# Every failed backend call ends the user action; nothing is retried.


@app.exception_handler(SilentWriteError)
async def silent_write_handler(request: Request, exc: SilentWriteError):
    logger.warning(f"Write not applied on {exc.table}: {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_403_FORBIDDEN,
        content={"detail": "Operation was not applied. Check your permissions."},
    )


@app.exception_handler(GatewayError)
async def gateway_error_handler(request: Request, exc: GatewayError):
    logger.error(f"Backend call failed on {exc.table}: {exc.message}")
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"detail": exc.message},
    )


# Versioned API prefix, e.g. /api/v1
app.include_router(users_router, prefix=settings.API_V1_STR)
app.include_router(patterns_router, prefix=settings.API_V1_STR)
app.include_router(favorites_router, prefix=settings.API_V1_STR)
app.include_router(orders_router, prefix=settings.API_V1_STR)


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "charlotte-backend"}
