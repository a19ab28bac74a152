"""
Health Routes
Health check and configuration endpoints
"""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from datetime import datetime
from ..auth import get_current_user
from ..dependencies import get_config, get_feature_store, auth_config

router = APIRouter()


@router.get("/", tags=["Health"])
async def root():
    """Basic health check endpoint - publicly accessible"""
    return {
        "message": "FeatureGen API",
        "status": "healthy",
        "version": "1.0.0",
        "docs_url": "/docs",
        "redoc_url": "/redoc",
        "authentication": "enabled" if auth_config.get("enabled", False) else "disabled"
    }


@router.get("/health", tags=["Health"])
def health_check():
    """Health check for the feature database - publicly accessible"""
    try:
        health_status = {
            "status": "healthy",
            "timestamp": datetime.now().isoformat(),
            "services": {}
        }

        try:
            store = get_feature_store()
            is_ready, message = store.check_database_ready()
            if is_ready:
                health_status["services"]["feature_db"] = "ready"
                health_status["stats"] = store.get_stats()
            else:
                health_status["services"]["feature_db"] = f"error: {message}"
                health_status["status"] = "degraded"
        except Exception as e:
            health_status["services"]["feature_db"] = f"error: {str(e)}"
            health_status["status"] = "degraded"

        return health_status
    except Exception as e:
        return JSONResponse(
            status_code=503,
            content={
                "status": "unhealthy",
                "error": str(e),
                "timestamp": datetime.now().isoformat()
            }
        )


@router.get("/models",
         tags=["Configuration"],
         summary="Get supported LLM models",
         description="List supported LLM providers and their available models")
async def get_supported_models(current_user: str = Depends(get_current_user)):
    """Get supported LLM providers and models"""
    config = get_config()
    return {
        "default_provider": config.llm.get('provider', 'openai'),
        "providers": config.get_supported_providers(),
        "models": config.get_supported_models()
    }
