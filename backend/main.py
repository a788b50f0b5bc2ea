from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .middleware_logging import register_request_logging
from .error_handlers import register_error_handlers

from backend.routers.health import router as health_router
from backend.routers.config_api import router as config_router
from backend.routers.workers_api import router as workers_router
from backend.routers.jobs_api import router as jobs_router
from backend.routers.payments_api import router as payments_router

import uvicorn

settings = get_settings()

# =========================
# ---- App Init ----
# =========================
app = FastAPI(title="YMIT Backend", version=settings.APP_VERSION)
register_request_logging(app)
register_error_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    # browsers refuse credentials together with a wildcard origin
    allow_credentials="*" not in settings.ALLOWED_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
def root():
    return {"success": True, "message": f"YMIT Backend is up. API lives under {settings.API_PREFIX or '/'}"}


# =========================
# ---- Routes ----
# =========================
for r in (health_router, config_router, workers_router, jobs_router, payments_router):
    app.include_router(r, prefix=settings.API_PREFIX)


if __name__ == "__main__":
    uvicorn.run("backend.main:app", host="0.0.0.0", port=settings.PORT)
