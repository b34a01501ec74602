import logging
from typing import Optional

from langchain_anthropic import ChatAnthropic
from langchain_core.language_models import BaseChatModel
from langchain_openai import ChatOpenAI

from config.settings import Settings, settings as default_settings
from exceptions import AIConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_MODELS = {
    "anthropic": "claude-3-5-sonnet-20241022",
    "openai": "gpt-4o",
}


class LLMService:
    """Service for managing LLM connections and interactions"""

    def __init__(self, settings: Optional[Settings] = None):
        """Keep settings; clients are created on first use"""
        self.settings = settings or default_settings
        self._text_model: Optional[BaseChatModel] = None
        self._vision_model: Optional[BaseChatModel] = None

    @property
    def provider(self) -> str:
        return self.settings.llm_provider.lower()

    def _create_model(self, model_name: Optional[str]) -> BaseChatModel:
        provider = self.provider
        if provider not in DEFAULT_MODELS:
            raise AIConfigurationError(f"LLM_PROVIDER '{self.settings.llm_provider}'")
        model_name = model_name or DEFAULT_MODELS[provider]

        if provider == "anthropic":
            if not self.settings.anthropic_api_key:
                raise AIConfigurationError("ANTHROPIC_API_KEY")
            logger.info(f"Creating Anthropic chat model {model_name}")
            return ChatAnthropic(
                anthropic_api_key=self.settings.anthropic_api_key,
                model=model_name,
                temperature=self.settings.llm_temperature,
                max_tokens=self.settings.llm_max_tokens
            )

        if not self.settings.openai_api_key:
            raise AIConfigurationError("OPENAI_API_KEY")
        logger.info(f"Creating OpenAI chat model {model_name}")
        return ChatOpenAI(
            openai_api_key=self.settings.openai_api_key,
            model=model_name,
            temperature=self.settings.llm_temperature,
            max_tokens=self.settings.llm_max_tokens
        )

    def get_text_model(self) -> BaseChatModel:
        """Chat model used for recipe generation"""
        if self._text_model is None:
            self._text_model = self._create_model(self.settings.text_model)
        return self._text_model

    def get_vision_model(self) -> BaseChatModel:
        """Multimodal chat model used for image scans"""
        if self._vision_model is None:
            self._vision_model = self._create_model(self.settings.vision_model or self.settings.text_model)
        return self._vision_model

