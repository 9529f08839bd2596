"""
FastAPI application for the Social Graph API.

Serves the GraphQL endpoint for users, posts, friendships and likes.

Responsibility: Main API application setup and configuration
"""

# Load .env BEFORE importing settings (critical for pydantic-settings)
from dotenv import load_dotenv
load_dotenv('.env', override=True)

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from strawberry.fastapi import GraphQLRouter
import logging

from src.config import Settings, settings as default_settings
from src.db import EntityStore, build_demo_store
from src.exceptions import SessionExpiredError
from src.services.auth_service import AuthService
from api.graphql import schema
from api.graphql.context import get_context

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[EntityStore] = None
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Configuration (defaults to the process-wide settings)
        store: Entity store to serve (defaults to demo data or an empty store,
            depending on ``settings.app.seed_demo_data``)

    Returns:
        Configured FastAPI app with the store and auth service on ``app.state``
    """
    settings = settings or default_settings

    # Configure logging
    logging.basicConfig(
        level=settings.app.log_level.upper(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    app = FastAPI(
        title=settings.app.app_name,
        description="GraphQL API for users, posts, friendships and likes",
        version=settings.app.app_version,
        docs_url="/docs",
        redoc_url="/redoc"
    )

    # One store per process, injected into every request through the context
    if store is None:
        if settings.app.seed_demo_data:
            store = build_demo_store(settings.auth.salt_rounds)
        else:
            store = EntityStore()
    app.state.store = store
    app.state.auth_service = AuthService(store, settings.auth)

    logger.info(f"CORS Origins configured: {settings.app.cors_origins}")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.app.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*", settings.auth.token_header],
        max_age=3600,  # Cache preflight for 1 hour
    )

    @app.on_event("startup")
    async def startup_event():
        """Log configuration on startup"""
        logger.info(f"Starting {settings.app.app_name}...")
        logger.info(f"Environment: {settings.app.environment.value}")
        logger.info(f"Debug mode: {settings.app.debug}")
        logger.info(f"Users loaded: {len(store.get_all_users())}")
        logger.info(f"Posts loaded: {len(store.get_all_posts())}")

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info(f"Shutting down {settings.app.app_name}...")

    @app.get("/")
    async def root():
        """Root endpoint - API information."""
        return {
            "name": settings.app.app_name,
            "version": settings.app.app_version,
            "status": "operational",
            "endpoints": {
                "graphql": "/graphql",
                "health": "/health",
                "docs": "/docs"
            }
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint for monitoring."""
        return {
            "status": "healthy",
            "service": "social-graph-api"
        }

    @app.exception_handler(SessionExpiredError)
    async def session_expired_handler(request: Request, exc: SessionExpiredError):
        """A presented but invalid token fails the whole GraphQL request."""
        return JSONResponse(
            status_code=401,
            content={
                "data": None,
                "errors": [{"message": exc.message, "extensions": exc.extensions}]
            }
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        """Global exception handler."""
        logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "detail": str(exc) if settings.app.debug else "An unexpected error occurred"
            }
        )

    graphql_app = GraphQLRouter(
        schema,
        context_getter=get_context,
        graphql_ide="graphiql" if settings.app.debug else None  # IDE only in debug mode
    )
    app.include_router(graphql_app, prefix="/graphql")
    logger.info("GraphQL endpoint mounted at /graphql")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=default_settings.app.api_host,
        port=default_settings.app.api_port,
        reload=True
    )
