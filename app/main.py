import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from app.config import settings
from app.core.rate_limit import limiter
from app.modules.auth import routes as auth_routes
from app.modules.profiles import routes as profiles_routes
from app.modules.messages import routes as messages_routes
from app.modules.direct_messages import routes as direct_messages_routes
from app.modules.snippets import routes as snippets_routes
from app.modules.runner import routes as runner_routes
from app.modules.runner.service import RunnerError, close_http_client
from app.modules.terminal import routes as terminal_routes
from app.modules.unread import routes as unread_routes
from app.modules.realtime import routes as realtime_routes
from app.modules.realtime.feed import feed

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


@app.exception_handler(RunnerError)
async def runner_exception_handler(request: Request, exc: RunnerError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s", exc)
    if settings.is_production:
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})
    return JSONResponse(status_code=500, content={"detail": str(exc)})


class SecurityHeadersMiddleware:
    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message):
            if message["type"] == "http.response.start":
                message.setdefault("headers", [])
                message["headers"].extend([
                    (b"X-Content-Type-Options", b"nosniff"),
                    (b"X-Frame-Options", b"DENY"),
                    (b"X-XSS-Protection", b"1; mode=block"),
                ])
            await send(message)

        await self.app(scope, receive, send_with_headers)


app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins_list(),
    # Browsers reject credentialed responses for a wildcard origin; bearer tokens travel in headers
    allow_credentials=not settings.allows_any_origin,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include module routes
app.include_router(auth_routes.router, prefix="/api/v1")
app.include_router(profiles_routes.router, prefix="/api/v1")
app.include_router(messages_routes.router, prefix="/api/v1")
app.include_router(direct_messages_routes.router, prefix="/api/v1")
app.include_router(snippets_routes.router, prefix="/api/v1")
app.include_router(runner_routes.router, prefix="/api/v1")
app.include_router(terminal_routes.router, prefix="/api/v1")
app.include_router(unread_routes.router, prefix="/api/v1")
app.include_router(realtime_routes.router, prefix="/api/v1")


@app.on_event("startup")
async def startup_event():
    logger.info("Application startup")

    if settings.realtime_enabled and settings.supabase_url:
        try:
            await feed.start()
        except Exception as e:
            logger.error(f"Realtime change feed unavailable: {e}")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Application shutdown")
    await feed.stop()
    await close_http_client()


@app.get("/")
async def root():
    return {"message": "Welcome to codeforge-backend", "status": "healthy"}


@app.get("/health")
@limiter.exempt
async def health():
    return {"status": "healthy"}


@app.get("/ready")
@limiter.exempt
async def ready():
    """Readiness probe"""
    return {"status": "ready"}
