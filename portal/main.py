import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from portal.config import settings
from portal.modules.auth import routes as auth_routes
from portal.modules.users import routes as users_routes
from portal.modules.tickets import routes as tickets_routes
from portal.modules.documents import routes as documents_routes
from portal.modules.announcements import routes as announcements_routes
from portal.modules.tasks import routes as tasks_routes
from portal.modules.calendar import routes as calendar_routes
from portal.modules.reports import routes as reports_routes
from portal.modules.dashboard import routes as dashboard_routes

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit])
app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    redirect_slashes=False,
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


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
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

for module_routes in (
    auth_routes,
    users_routes,
    tickets_routes,
    documents_routes,
    announcements_routes,
    tasks_routes,
    calendar_routes,
    reports_routes,
    dashboard_routes,
):
    app.include_router(module_routes.router, prefix="/api/v1")


@app.on_event("startup")
async def startup_event():
    logger.info("Application startup")
    app.state.auth_subscription = None
    if not settings.supabase_url:
        logger.warning("SUPABASE_URL not set; auth state logging disabled")
        return
    try:
        from portal.database.supabase_client import SupabaseClient
        from portal.modules.auth.service import AuthService
        service = AuthService(SupabaseClient.get_client())
        app.state.auth_subscription = service.subscribe_auth_events()
        logger.info("Subscribed to auth state changes")
    except Exception as e:
        logger.error(f"Could not subscribe to auth state changes: {e}")


@app.on_event("shutdown")
async def shutdown_event():
    subscription = getattr(app.state, "auth_subscription", None)
    if subscription is not None:
        try:
            subscription.unsubscribe()
        except Exception as e:
            logger.error(f"Error unsubscribing from auth state changes: {e}")
    logger.info("Application shutdown")


@app.get("/")
async def root():
    return {"message": f"Welcome to {settings.app_name}", "status": "healthy"}


@app.get("/health")
@limiter.exempt
async def health():
    return {"status": "healthy"}


@app.get("/ready")
@limiter.exempt
async def ready():
    """Readiness probe: reports whether the BaaS connection is configured."""
    return {"status": "ready", "supabase_configured": bool(settings.supabase_url)}
