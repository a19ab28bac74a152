"""
Main FastAPI Application
FastAPI app creation, CORS configuration and startup/shutdown events
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
import os
import logging

from .dependencies import initialize_services, auth_config
from .routes import api_router

logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="FeatureGen",
    description="Generate Cucumber feature files from user stories and keep their complexity analysis in step with the scenarios.",
    version="1.0.0",
    license_info={
        "name": "MIT License",
        "url": "https://opensource.org/licenses/MIT"
    },
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

# Explicit origins used outside development (comma separated)
cors_origins = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:3000").split(",")
    if origin.strip()
]

is_development = os.getenv("ENVIRONMENT", "development").lower() == "development"

if is_development:
    logger.info("CORS: Running in development mode - allowing all origins")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,  # Must be False when using allow_origins=["*"]
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
        allow_headers=["*"],
    )
else:
    logger.info(f"CORS: Running in production mode - allowing {len(cors_origins)} origins")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
        allow_headers=["*"],
    )


# Include all routers
app.include_router(api_router)


def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema

    openapi_schema = get_openapi(
        title="FeatureGen API",
        version="1.0.0",
        description=app.description,
        routes=app.routes,
    )

    openapi_schema.setdefault("components", {})["securitySchemes"] = {
        "HTTPBasic": {
            "type": "http",
            "scheme": "basic",
            "description": "HTTP Basic Authentication. Required when AUTH_ENABLED=true (except for health check endpoints)."
        }
    }

    if auth_config.get("enabled", False):
        for path, methods in openapi_schema.get("paths", {}).items():
            if path in ["/", "/health"]:
                continue
            for method in methods.values():
                if isinstance(method, dict) and "security" not in method:
                    method["security"] = [{"HTTPBasic": []}]

    app.openapi_schema = openapi_schema
    return app.openapi_schema


app.openapi = custom_openapi


@app.on_event("startup")
async def startup_event():
    """Initialize all services on startup"""
    initialize_services()


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown"""
    logger.info("Application shutting down")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000, log_level="info")
