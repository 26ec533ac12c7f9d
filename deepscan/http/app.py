from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from deepscan.config.settings import Settings
from deepscan.http.errors import register_exception_handlers
from deepscan.http.middleware import RequestValidationMiddleware, SecurityHeadersMiddleware
from deepscan.http.routes import router
from deepscan.http.services import Services, build_services
from deepscan.logging.logger import Log


def _log_environment(settings: Settings) -> None:
    Log.info("=== ENVIRONMENT VARIABLE CHECK ===")
    Log.info(f"- SIGHTENGINE_USER: {'SET' if settings.sightengine_user else 'MISSING'}")
    Log.info(f"- SIGHTENGINE_SECRET: {'SET' if settings.sightengine_secret else 'MISSING'}")
    Log.info(f"- RESEMBLE_API_KEY: {'SET' if settings.resemble_api_key else 'MISSING'}")
    Log.info(f"- API Status: {'READY' if settings.sightengine_configured else 'DEMO MODE'}")


def create_app(
    settings: Settings | None = None,
    services: Services | None = None,
) -> FastAPI:
    """Build the HTTP application.

    Middleware runs outermost first: security headers -> request validation
    -> CORS -> route rate limits -> handler.
    """
    settings = settings if settings is not None else Settings()
    services = services if services is not None else build_services(settings)
    _log_environment(settings)

    app = FastAPI(title="deepscan", version="0.1.0")
    app.state.services = services

    # add_middleware wraps, so the last one added runs first
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
        allow_credentials=False,
        max_age=86400,
    )
    app.add_middleware(
        RequestValidationMiddleware,
        max_body_bytes=settings.max_upload_bytes,
        allowed_origins=settings.cors_allowed_origins,
        block_suspicious_user_agents=settings.block_suspicious_user_agents,
    )
    app.add_middleware(SecurityHeadersMiddleware)

    register_exception_handlers(app)
    app.include_router(router)
    return app
