"""
Shared Dependencies
Global services and configuration shared across all routes
"""
from typing import Optional
from featuregen.config import Config
from featuregen.llm_client import LLMClient
from featuregen.feature_store import FeatureStore
from featuregen.feature_generator import FeatureGenerator
from featuregen.complexity_analyzer import ComplexityAnalyzer
from featuregen.feature_service import FeatureService
import logging

logger = logging.getLogger(__name__)

# Global variables for services (initialized on startup)
config: Optional[Config] = None
llm_client: Optional[LLMClient] = None
feature_store: Optional[FeatureStore] = None
feature_service: Optional[FeatureService] = None

# Authentication configuration (will be loaded from config)
auth_config: dict = {
    "enabled": False,
    "username": "",
    "password_hash": ""
}


def get_config() -> Config:
    """Get Config instance"""
    if config is None:
        raise RuntimeError("Config not initialized - ensure startup event completed")
    return config


def get_feature_store() -> FeatureStore:
    """Get FeatureStore instance"""
    if feature_store is None:
        raise RuntimeError("Feature store not initialized - ensure startup event completed")
    return feature_store


def get_feature_service() -> FeatureService:
    """Get FeatureService instance"""
    if feature_service is None:
        raise RuntimeError("Feature service not initialized - ensure startup event completed")
    return feature_service


def initialize_services():
    """Initialize all clients and services"""
    global config, llm_client, feature_store, feature_service

    try:
        config = Config()

        # Load authentication configuration
        auth_config.update({
            "enabled": config.auth.get('enabled', False),
            "username": config.auth.get('username', ''),
            "password_hash": config.auth.get('password_hash', '')
        })

        if auth_config["enabled"]:
            logger.info("Authentication is ENABLED")
            if not auth_config["username"] or not auth_config["password_hash"]:
                logger.warning("Authentication enabled but credentials not properly configured")
        else:
            logger.info("Authentication is DISABLED")

        if not config.validate():
            raise ValueError("Configuration validation failed")

        llm_config = config.get_llm_config()
        llm_client = LLMClient(llm_config)
        feature_store = FeatureStore(config.get_db_path())
        max_tokens = llm_config.get('max_tokens') or 2000
        feature_service = FeatureService(
            store=feature_store,
            generator=FeatureGenerator(llm_client, max_tokens=max_tokens),
            analyzer=ComplexityAnalyzer(llm_client),
            max_scenarios=config.get_max_scenarios(),
        )

        logger.info("✅ All services initialized successfully")

    except Exception as e:
        logger.error(f"❌ Failed to initialize services: {e}")
        raise
