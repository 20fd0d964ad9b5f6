import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# ✅ Import All API Routes
from app.api.routes import (
    establishments,
    emission_points,
    warehouses,
    contacts,
    company_users,
    subscription_plans,
    companies,
    system,
)
from app.core import config
from app.core.errors import EntitlementError
from app.core.logging_config import setup_logging

logger = logging.getLogger(__name__)


# ============================================
# ✅ FASTAPI APP INIT
# ============================================

app = FastAPI(title="Entitlements API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "PUT"],
    allow_headers=["Authorization", "Content-Type"],
)


# ============================================
# ✅ ERROR MAPPING
# ============================================

@app.exception_handler(EntitlementError)
async def entitlement_error_handler(request: Request, exc: EntitlementError):
    log_level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
    logger.log(log_level, f"{exc.code} on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.code, "detail": str(exc)},
    )


# ============================================
# ✅ REGISTER ALL ROUTERS
# ============================================

app.include_router(establishments.router)
app.include_router(emission_points.router)
app.include_router(warehouses.router)
app.include_router(contacts.router)
app.include_router(company_users.router)
app.include_router(subscription_plans.router)
app.include_router(companies.router)
app.include_router(system.router)


@app.on_event("startup")
def on_startup():
    setup_logging(config.LOG_LEVEL)
    if config.RUN_MIGRATIONS:
        from app.db.migrate import run_migrations
        run_migrations()


# ============================================
# ✅ HEALTH CHECK ROOT ENDPOINT
# ============================================

@app.get("/")
def root():
    return {"status": "Entitlements API running"}
