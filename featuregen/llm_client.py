from abc import ABC, abstractmethod
from typing import Optional
import logging
import json

from .prompts import Prompts

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60.0


class LLMProvider(ABC):
    """Abstract base class for LLM providers"""

    def __init__(self, api_key: str, model: str, system_prompt: str, temperature: float = 0.3, max_tokens: Optional[int] = None,
                 timeout: float = DEFAULT_TIMEOUT):
        self.api_key = api_key
        self.model = model
        self.system_prompt = system_prompt
        self.temperature = temperature
        self.config_max_tokens = max_tokens  # None = use provider defaults
        self.timeout = timeout

    @abstractmethod
    def generate_text(self, prompt: str, max_tokens: Optional[int] = None, system_prompt: Optional[str] = None) -> str:
        """Generate free-form text using the LLM provider"""
        pass

    def generate_json(self, prompt: str, max_tokens: Optional[int] = None, system_prompt: Optional[str] = None) -> str:
        """
        Generate a JSON response (provider-specific implementation)

        Args:
            prompt: The prompt to send to the LLM (should include JSON format instructions)
            max_tokens: Maximum tokens to generate

        Returns:
            JSON string, not wrapped in markdown
        """
        response = self.generate_text(prompt, max_tokens=max_tokens, system_prompt=system_prompt)
        return self._extract_json_from_response(response)

    def _extract_json_from_response(self, response: str) -> str:
        """Extract JSON from response, handling markdown code blocks"""
        response = (response or "").strip()

        if response.startswith('```json'):
            response = response[7:]
        elif response.startswith('```'):
            response = response[3:]
        if response.endswith('```'):
            response = response[:-3]
        response = response.strip()

        # Prefer JSON objects over arrays
        object_start = response.find('{')
        array_start = response.find('[')
        start_idx = object_start if object_start != -1 else array_start

        if start_idx != -1:
            bracket_stack = []
            end_idx = start_idx
            for i in range(start_idx, len(response)):
                if response[i] in '[{':
                    bracket_stack.append(response[i])
                elif response[i] in ']}':
                    if bracket_stack:
                        bracket_stack.pop()
                        if not bracket_stack:
                            end_idx = i
                            break

            if end_idx > start_idx:
                return response[start_idx:end_idx + 1]

        return response


class OpenAIProvider(LLMProvider):
    """OpenAI GPT provider"""

    DEFAULT_MAX_TOKENS = 2000

    def __init__(self, api_key: str, model: str, system_prompt: str, temperature: float = 0.3, max_tokens: Optional[int] = None,
                 timeout: float = DEFAULT_TIMEOUT):
        super().__init__(api_key, model, system_prompt, temperature, max_tokens=max_tokens, timeout=timeout)
        from openai import OpenAI
        # SDK retries off: each call is exactly one request
        self.client = OpenAI(api_key=api_key, timeout=timeout, max_retries=0)

    def _resolve_max_tokens(self, max_tokens: Optional[int]) -> int:
        # Priority: per-call override > config max_tokens > default
        if max_tokens is not None:
            return max_tokens
        if self.config_max_tokens is not None:
            return self.config_max_tokens
        return self.DEFAULT_MAX_TOKENS

    def generate_text(self, prompt: str, max_tokens: Optional[int] = None, system_prompt: Optional[str] = None) -> str:
        try:
            logger.debug(f"OpenAI prompt ({self.model}):\n{prompt}")
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt or self.system_prompt},
                    {"role": "user", "content": prompt}
                ],
                max_tokens=self._resolve_max_tokens(max_tokens),
                temperature=self.temperature
            )

            result = response.choices[0].message.content or ""
            finish_reason = response.choices[0].finish_reason
            if finish_reason == 'length':
                logger.warning("⚠️ OpenAI response was truncated (finish_reason=length). Consider increasing max_tokens.")

            logger.info(f"OpenAI response length: {len(result)} characters, finish_reason: {finish_reason}")
            return result
        except Exception as e:
            logger.error(f"OpenAI API error: {e}")
            raise

    def generate_json(self, prompt: str, max_tokens: Optional[int] = None, system_prompt: Optional[str] = None) -> str:
        """Generate JSON with OpenAI's JSON mode (objects only)"""
        json_prompt = prompt
        if "json" not in prompt.lower():
            json_prompt = f"{prompt}\n\n{Prompts.get_json_response_instruction()}"

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt or self.system_prompt},
                    {"role": "user", "content": json_prompt}
                ],
                response_format={"type": "json_object"},
                max_tokens=self._resolve_max_tokens(max_tokens),
                temperature=self.temperature
            )
        except Exception as e:
            logger.error(f"OpenAI JSON generation error: {e}")
            raise

        result = response.choices[0].message.content or ""
        logger.info(f"OpenAI JSON response length: {len(result)} characters, finish_reason: {response.choices[0].finish_reason}")

        try:
            json.loads(result)
        except json.JSONDecodeError as e:
            logger.warning(f"⚠️ OpenAI JSON mode returned invalid JSON: {e}")
            result = self._extract_json_from_response(result)

        return result


class ClaudeProvider(LLMProvider):
    """Anthropic Claude provider"""

    def __init__(self, api_key: str, model: str, system_prompt: str, temperature: float = 0.3, max_tokens: Optional[int] = None,
                 timeout: float = DEFAULT_TIMEOUT):
        super().__init__(api_key, model, system_prompt, temperature, max_tokens=max_tokens, timeout=timeout)
        self.default_max_tokens = self.config_max_tokens if self.config_max_tokens is not None else 8000
        import anthropic
        self.client = anthropic.Anthropic(api_key=api_key, timeout=timeout, max_retries=0)

    def generate_text(self, prompt: str, max_tokens: Optional[int] = None, system_prompt: Optional[str] = None) -> str:
        try:
            tokens_to_use = max_tokens if max_tokens is not None else self.default_max_tokens

            response = self.client.messages.create(
                model=self.model,
                max_tokens=tokens_to_use,
                temperature=self.temperature,
                system=system_prompt or self.system_prompt,
                messages=[
                    {"role": "user", "content": prompt}
                ]
            )

            stop_reason = response.stop_reason
            if stop_reason == "max_tokens":
                logger.warning(f"Claude response was truncated due to max_tokens limit ({tokens_to_use})")

            result = response.content[0].text
            logger.info(f"Claude response length: {len(result)} characters, stop_reason: {stop_reason}")
            return result
        except Exception as e:
            logger.error(f"Claude API error: {e}")
            raise

    def generate_json(self, prompt: str, max_tokens: Optional[int] = None, system_prompt: Optional[str] = None) -> str:
        """
        Generate JSON with Claude using prompt-based instructions and extraction

        Claude has no response_format parameter, so the JSON instruction is
        appended explicitly and the object is cut out of the reply.
        """
        json_prompt = f"{prompt}\n\n{Prompts.get_claude_json_response_instruction()}"
        response_text = self.generate_text(json_prompt, max_tokens=max_tokens, system_prompt=system_prompt)
        result = self._extract_json_from_response(response_text)

        try:
            json.loads(result)
        except json.JSONDecodeError as e:
            logger.warning(f"⚠️ Claude JSON extraction returned invalid JSON: {e}")
            raise ValueError(f"Failed to extract valid JSON from Claude response: {e}")

        return result


class LLMClient:
    """Factory class for LLM providers"""

    def __init__(self, config: dict):
        self.provider_name = config['provider'].lower()
        self.config = config
        self.default_max_tokens = config.get('max_tokens')
        self.provider = self._create_provider(config)
        logger.info(f"LLMClient initialized: provider={self.provider_name}, model={config.get('model')}")

    def _create_provider(self, config: dict) -> LLMProvider:
        """Create the appropriate LLM provider"""
        provider = config['provider'].lower()
        api_key = config['api_key']
        model = config['model']
        system_prompt = config['system_prompt']
        temperature = config.get('temperature', 0.3)
        max_tokens = config.get('max_tokens')
        timeout = config.get('timeout') or DEFAULT_TIMEOUT

        if provider == "openai":
            return OpenAIProvider(api_key, model, system_prompt, temperature, max_tokens=max_tokens, timeout=timeout)
        elif provider == "claude":
            return ClaudeProvider(api_key, model, system_prompt, temperature, max_tokens=max_tokens, timeout=timeout)
        else:
            raise ValueError(f"Unsupported LLM provider: {provider}")

    def generate_content(self, prompt: str, system_prompt: str = None, max_tokens: Optional[int] = None) -> str:
        """
        Generate content using the configured provider with custom prompts

        Args:
            prompt: The prompt to send to the LLM
            system_prompt: Optional system prompt override for this call only
            max_tokens: Maximum tokens to generate (default: config max_tokens or provider default)

        Returns:
            Generated content as string
        """
        if max_tokens is None:
            max_tokens = self.default_max_tokens
        return self.provider.generate_text(prompt, max_tokens=max_tokens, system_prompt=system_prompt)

    def generate_content_json(self, prompt: str, system_prompt: str = None, max_tokens: Optional[int] = None) -> str:
        """
        Generate JSON content with enforced JSON mode

        - OpenAI: response_format={"type": "json_object"}
        - Claude: prompt-based JSON generation with extraction

        Returns:
            JSON string (validated with json.loads)

        Raises:
            ValueError: the provider did not return valid JSON
        """
        if max_tokens is None:
            max_tokens = self.default_max_tokens

        result = self.provider.generate_json(prompt, max_tokens=max_tokens, system_prompt=system_prompt)

        try:
            json.loads(result)
        except json.JSONDecodeError as e:
            logger.error(f"❌ Generated response is not valid JSON: {e}")
            logger.error(f"Response preview: {result[:500]}")
            raise ValueError(f"LLM did not return valid JSON: {e}")

        return result

    def test_connection(self) -> bool:
        """Test if the LLM provider is working"""
        try:
            response = self.provider.generate_text("Hello, please respond with 'Connection successful'")
            return "successful" in response.lower()
        except Exception as e:
            logger.error(f"LLM connection test failed: {e}")
            return False
