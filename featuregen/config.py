import os
import re
import yaml
import logging
from typing import Dict, Any, Optional, List
from dotenv import load_dotenv
from .prompts import Prompts

logger = logging.getLogger(__name__)


class Config:
    """Configuration manager for FeatureGen"""

    def __init__(self, config_path: Optional[str] = None):
        load_dotenv()
        self.config_path = config_path or os.getenv('FEATUREGEN_CONFIG', 'config.yaml')
        self._config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file with environment variable substitution"""
        if not os.path.exists(self.config_path):
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        with open(self.config_path, 'r') as file:
            config_content = file.read()

        config_content = self._substitute_env_vars(config_content)

        return yaml.safe_load(config_content) or {}

    def _substitute_env_vars(self, content: str) -> str:
        """Replace ${VAR_NAME} and ${VAR_NAME:default} with environment variables"""
        def replace_var(match):
            var_expr = match.group(1)
            if ':' in var_expr:
                var_name, default_value = var_expr.split(':', 1)
                return os.getenv(var_name, default_value)
            else:
                return os.getenv(var_expr, '')

        return re.sub(r'\$\{([^}]+)\}', replace_var, content)

    @property
    def llm(self) -> Dict[str, Any]:
        return self._config.get('llm') or {}

    @property
    def auth(self) -> Dict[str, Any]:
        return self._config.get('auth') or {}

    @property
    def storage(self) -> Dict[str, Any]:
        return self._config.get('storage') or {}

    @property
    def processing(self) -> Dict[str, Any]:
        return self._config.get('processing') or {}

    def get_db_path(self) -> Optional[str]:
        """Database path from FEATUREGEN_DB_PATH or the storage section (None = default location)"""
        return os.getenv('FEATUREGEN_DB_PATH') or self.storage.get('db_path') or None

    def get_max_scenarios(self) -> int:
        """Upper bound for the declared scenario count on new features"""
        return int(os.getenv('MAX_SCENARIOS_PER_FEATURE', self.processing.get('max_scenarios', 10)))

    def get_supported_providers(self) -> List[str]:
        """Get list of supported LLM providers"""
        return ['openai', 'claude']

    def get_supported_models(self) -> Dict[str, List[str]]:
        """Get supported models for each provider"""
        return {
            'openai': [
                'gpt-4o', 'gpt-4o-mini', 'gpt-4.1', 'gpt-4.1-mini', 'gpt-4.1-nano', 'gpt-4-turbo',
                'o3', 'o3-mini', 'o4-mini', 'gpt-5', 'gpt-5-mini'
            ],
            'claude': [
                'claude-haiku-4-5', 'claude-sonnet-4-5', 'claude-opus-4-1', 'claude-sonnet-4-0',
                'claude-3-7-sonnet-latest', 'claude-3-5-haiku-latest'
            ]
        }

    def validate_llm_provider(self, provider: str) -> bool:
        """Validate if the provider is supported"""
        return provider in self.get_supported_providers()

    def validate_llm_model(self, provider: str, model: str) -> bool:
        """Validate if the model is supported for the given provider"""
        supported_models = self.get_supported_models()
        return provider in supported_models and model in supported_models[provider]

    def get_llm_config(self, provider: Optional[str] = None, model: Optional[str] = None) -> Dict[str, Any]:
        """Get configuration for the specified or default LLM provider"""
        provider = provider or self.llm.get('provider', 'openai')

        if not self.validate_llm_provider(provider):
            raise ValueError(f"Unsupported LLM provider: {provider}. Supported providers: {self.get_supported_providers()}")

        # YAML may parse numbers as int, an empty string means "use provider defaults"
        max_tokens_config = self.llm.get('max_tokens', '')
        max_tokens = None
        if max_tokens_config is None or (isinstance(max_tokens_config, str) and not max_tokens_config.strip()):
            logger.debug("max_tokens not set in config, using provider defaults")
        else:
            try:
                max_tokens = int(max_tokens_config)
            except (ValueError, TypeError) as e:
                logger.warning(f"Invalid max_tokens config value: {max_tokens_config!r}, using provider defaults. Error: {e}")

        config = {
            'provider': provider,
            'system_prompt': self.llm.get('system_prompt') or Prompts.get_default_system_prompt(),
            'temperature': float(self.llm.get('temperature', 0.3)),
            'max_tokens': max_tokens,
            'timeout': float(self.llm.get('timeout') or 60)
        }

        if provider == 'openai':
            config['api_key'] = self.llm.get('openai_api_key')
            config['model'] = model or self.llm.get('openai_model') or 'gpt-4o'
        elif provider == 'claude':
            config['api_key'] = self.llm.get('anthropic_api_key')
            config['model'] = model or self.llm.get('anthropic_model') or 'claude-sonnet-4-5'

        if model and not self.validate_llm_model(provider, config['model']):
            raise ValueError(f"Unsupported model '{config['model']}' for provider '{provider}'. Supported models: {self.get_supported_models()[provider]}")

        return config

    def validate(self) -> bool:
        """Validate that all required configuration is present"""
        errors = []

        provider = self.llm.get('provider')
        if not provider:
            errors.append("Missing LLM provider configuration")
        else:
            try:
                llm_config = self.get_llm_config()
                if not llm_config.get('api_key'):
                    errors.append(f"Missing API key for LLM provider: {provider}")
            except ValueError as e:
                errors.append(f"LLM configuration error: {str(e)}")

        if self.auth.get('enabled') and not (self.auth.get('username') and self.auth.get('password_hash')):
            errors.append("Authentication enabled but username/password_hash missing")

        for error in errors:
            logger.error(f"Configuration Error: {error}")

        return not errors
