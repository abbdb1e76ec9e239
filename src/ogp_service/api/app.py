from fastapi import BackgroundTasks, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from ogp_service.api.dependencies import ENDPOINT_NAMES, Services, get_services, lifespan
from ogp_service.config import get_settings
from ogp_service.dto import HealthCheckResponse
from ogp_service.logging_setup import setup_logging


def _image_route(name: str):
    async def image(request: Request, background_tasks: BackgroundTasks) -> Response:
        """Render or serve the cached social preview image."""
        services = get_services(request)
        return await services.handlers[name].handle(request.query_params, background_tasks)

    image.__name__ = f"{name}_image"
    return image


def create_app(services: Services | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        services: Pre-built services. When None, the lifespan builds them
            from environment settings.

    Returns:
        Configured FastAPI application
    """
    settings = get_settings()
    setup_logging(settings.log_level)

    app = FastAPI(
        title="OGP Image Service",
        description="Social preview images for the blog and the tools catalog",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    if services is not None:
        app.state.services = services

    for name in ENDPOINT_NAMES:
        app.add_api_route(f"/{name}/image.png", _image_route(name), methods=["GET"])

    @app.get("/health", response_model=HealthCheckResponse)
    async def health(request: Request) -> Response:
        """Health check endpoint."""
        store_ok = await get_services(request).store.health_check()
        body = HealthCheckResponse(status="healthy" if store_ok else "unhealthy", cache=store_ok)
        return JSONResponse(
            body.model_dump(),
            status_code=status.HTTP_200_OK if store_ok else status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            return PlainTextResponse("Not Found", status_code=status.HTTP_404_NOT_FOUND)
        return JSONResponse({"detail": exc.detail}, status_code=exc.status_code, headers=exc.headers)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "ogp_service.api.app:app",
        host=get_settings().api_host,
        port=get_settings().api_port,
        reload=get_settings().api_reload,
    )
