"""Application factory for creating FastAPI application with dependency injection."""

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from biohub.web.core.container import Container
from biohub.web.core.lifespan import lifespan
from biohub.web.middleware.request_logging import StructuredRequestLoggingMiddleware
from biohub.web.routers import species_speed_api_routes, species_speed_view_routes


def create_app(container: Container | None = None) -> FastAPI:
    """Create FastAPI application with dependency injection.

    Args:
        container: Optional pre-built container, e.g. with providers overridden.

    Returns:
        FastAPI: The configured application instance.
    """
    container = container or Container()

    app = FastAPI(
        lifespan=lifespan,
        title="Biodiversity Hub API",
        description="Species speed analytics for Biodiversity Hub",
        version="1.0.0",
    )
    app.container = container  # type: ignore[attr-defined]

    app.add_middleware(StructuredRequestLoggingMiddleware)

    container.wire(
        modules=[
            "biohub.web.routers.species_speed_api_routes",
            "biohub.web.routers.species_speed_view_routes",
        ]
    )

    # === API Routes (included in documentation) ===
    app.include_router(
        species_speed_api_routes.router, prefix="/api", tags=["Species Speed API"]
    )

    # === View Routes (excluded from API documentation) ===
    app.include_router(
        species_speed_view_routes.router,
        tags=["Species Speed Views"],
        include_in_schema=False,
    )

    @app.get("/", include_in_schema=False)
    async def read_root() -> RedirectResponse:
        """Send visitors to the species speed page."""
        return RedirectResponse(url="/species-speed")

    return app
