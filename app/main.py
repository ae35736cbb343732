import logging
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException

from app.config.settings import settings
from app.core.middleware import SecurityHeadersMiddleware, BodySizeLimitMiddleware
from app.core.rate_limit import limiter
from app.modules.auth import routes as auth_routes
from app.modules.users import routes as users_routes
from app.modules.songs import routes as songs_routes
from app.modules.song_versions import routes as song_versions_routes
from app.modules.service_types import routes as service_types_routes
from app.modules.services import routes as services_routes
from app.modules.worship_sets import routes as worship_sets_routes
from app.modules.set_songs import routes as set_songs_routes
from app.modules.suggestion_slots import routes as suggestion_slots_routes
from app.modules.suggestions import routes as suggestions_routes
from app.modules.instruments import routes as instruments_routes
from app.modules.assignments import routes as assignments_routes
from app.modules.default_assignments import routes as default_assignments_routes
from app.modules.leader_rotations import routes as leader_rotations_routes
from app.modules.user_instruments import routes as user_instruments_routes
from app.modules.notifications import routes as notifications_routes

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    redirect_slashes=False,
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.detail}")
    else:
        logger.warning(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": {"message": exc.detail}},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"{request.method} {request.url.path} -> 400: invalid request")
    return JSONResponse(
        status_code=400,
        content={"error": {"message": "Validation failed", "details": jsonable_encoder(exc.errors())}},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s", exc)
    if settings.is_production:
        return JSONResponse(status_code=500, content={"error": {"message": "Internal server error"}})
    return JSONResponse(status_code=500, content={"error": {"message": str(exc)}})


app.add_middleware(SlowAPIMiddleware)
app.add_middleware(BodySizeLimitMiddleware, max_bytes=settings.max_request_body_bytes)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include module routes
app.include_router(auth_routes.router, prefix="/api/v1")
app.include_router(users_routes.router, prefix="/api/v1")
app.include_router(user_instruments_routes.router, prefix="/api/v1")
app.include_router(songs_routes.router, prefix="/api/v1")
app.include_router(song_versions_routes.router, prefix="/api/v1")
app.include_router(service_types_routes.router, prefix="/api/v1")
app.include_router(services_routes.router, prefix="/api/v1")
app.include_router(worship_sets_routes.router, prefix="/api/v1")
app.include_router(set_songs_routes.router, prefix="/api/v1")
app.include_router(suggestion_slots_routes.router, prefix="/api/v1")
app.include_router(suggestions_routes.router, prefix="/api/v1")
app.include_router(instruments_routes.router, prefix="/api/v1")
app.include_router(assignments_routes.router, prefix="/api/v1")
app.include_router(default_assignments_routes.router, prefix="/api/v1")
app.include_router(leader_rotations_routes.router, prefix="/api/v1")
app.include_router(notifications_routes.router, prefix="/api/v1")


@app.on_event("startup")
async def startup_event():
    logger.info(f"{settings.app_name} startup ({settings.environment})")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Application shutdown")


@app.get("/")
@limiter.exempt
async def root():
    return {"message": f"Welcome to {settings.app_name}", "status": "healthy"}


@app.get("/health")
@limiter.exempt
async def health():
    return {"status": "healthy"}


@app.get("/ready")
@limiter.exempt
async def ready():
    """Readiness probe: extend here with a database check if needed."""
    return {"status": "ready"}
