from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from map_proxy.config import CORS_ORIGINS
from map_proxy.exceptions import setup_exception_handlers
from map_proxy.logging_config import log_structured
from map_proxy.middlewares.request_id import request_id_middleware
from map_proxy.routes import health, map_routes


def create_app() -> FastAPI:
    app = FastAPI(
        title="Map Proxy",
        version="1.0.0"
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.middleware("http")(request_id_middleware)
    setup_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(map_routes.router)

    log_structured("Application created")
    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
