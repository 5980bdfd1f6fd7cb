"""Mailchimp Connect - web server.

It handles:
- Newsletter signup to a fixed list (/signup)
- Mailchimp OAuth for operators (/mailchimp/auth/*)
- Read-only proxy to a connected account's lists and members (/mailchimp/*)
- Static HTML pages (signup form, list picker)

Run with `mailchimp-connect start`, `python main.py`, or
`uvicorn --factory main:create_app`.
"""
import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from supabase import create_client, Client

from config import Settings, load_settings
from logging_config import flush_logs, setup_logging
from mailchimp_client import MailchimpClient
from oauth.stores import CredentialStore

VERSION = "1.0.0"

logger = logging.getLogger(__name__)


def create_supabase(settings: Settings):
    """Supabase client for log shipping, or None when not configured."""
    supabase: Client = None
    if settings.supabase_url and settings.supabase_anon_key:
        supabase = create_client(settings.supabase_url, settings.supabase_anon_key)
    return supabase


def create_app(
    settings: Settings = None,
    store: CredentialStore = None,
    transport: httpx.AsyncBaseTransport = None,
) -> FastAPI:
    """Build the application.

    Args:
        settings: Loaded from the environment when omitted.
        store: Credential store shared by all handlers; a fresh one by default.
        transport: Optional httpx transport for outbound Mailchimp calls.
    """
    settings = settings or load_settings()
    store = store if store is not None else CredentialStore()
    http = httpx.AsyncClient(timeout=settings.http_timeout, transport=transport)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await http.aclose()
        flush_logs()

    app = FastAPI(
        title="Mailchimp Connect",
        description="Newsletter signup and Mailchimp account browsing via OAuth",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.mailchimp = MailchimpClient(settings, http)

    # ============== Include Routers ==============

    from signup import router as signup_router
    from oauth.endpoints import router as oauth_router
    from lists import router as lists_router

    app.include_router(signup_router)
    app.include_router(oauth_router)
    app.include_router(lists_router)

    if not settings.oauth_configured():
        logger.warning("[STARTUP] MAILCHIMP_CLIENT_ID/MAILCHIMP_CLIENT_SECRET not set, OAuth will fail")
    if not settings.signup_configured():
        logger.warning("[STARTUP] Signup list not configured, /signup will fail")

    # ============== Server Info Endpoints ==============

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "service": settings.service_name,
            "version": VERSION,
            "connected_accounts": len(store),
        }

    # Static pages last so they don't shadow the API routes
    if settings.static_dir.is_dir():
        app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")
    else:
        logger.warning(f"[STARTUP] Static directory not found: {settings.static_dir}")

    return app


def run(settings: Settings = None):
    """Configure logging and serve the app with uvicorn."""
    import uvicorn

    settings = settings or load_settings()
    setup_logging(service_name=settings.service_name, supabase_client=create_supabase(settings))
    logger.info(f"[STARTUP] Listening on http://{settings.host}:{settings.port}")
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


# ============== Main Entry Point ==============

if __name__ == "__main__":
    run()
