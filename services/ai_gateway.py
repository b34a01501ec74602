"""
Chef Gateway - the boundary to the hosted text/vision model

Builds prompts, calls the chat model under the rate-limit retry policy and
parses the JSON reply into typed models. Callers get a fully validated result
or an exception; a partially populated result is never returned.
"""

import asyncio
import json
import logging
import time
from typing import Any, Awaitable, Callable, Dict, List, Optional, Type, TypeVar, Union

import logfire
from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage
from langchain_core.utils.json import parse_json_markdown
from pydantic import BaseModel, ValidationError

from core.retry import RetryConfig, with_retry_config
from exceptions import (
    AIServiceError,
    ChefGatewayError,
    ReplyParseError,
    UnsupportedRequestError,
)
from models.ai_models import (
    ChefRequest,
    GenerateRequest,
    GeneratedRecipe,
    ImageScanRequest,
    RequestType,
    ScanMode,
    ScanResult,
)
from models.recipe import Recipe
from prompts.templates import ChefPrompts, JSON_ONLY, RECIPE_FORMAT
from .llm_service import LLMService

logger = logging.getLogger(__name__)

ReplyT = TypeVar("ReplyT", bound=BaseModel)


def reply_text(response: Any) -> str:
    """Extract the text of a chat model reply; Anthropic may return content blocks"""
    content = getattr(response, "content", response)
    if isinstance(content, list):
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                parts.append(block.get("text", ""))
        return "".join(parts)
    return str(content)


class ChefGateway:
    """
    Issues recipe generation and image scan requests

    Chat models are injected for tests; otherwise they come from the
    LLMService on first use.
    """

    def __init__(
        self,
        chat_model=None,
        vision_model=None,
        retry_config: Optional[RetryConfig] = None,
        llm_service: Optional[LLMService] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep
    ):
        self._chat_model = chat_model
        self._vision_model = vision_model
        self.retry_config = retry_config or RetryConfig()
        self.llm_service = llm_service
        self._sleep = sleep
        self.generate_prompt = ChefPrompts.get_generate_prompt()

    def _get_llm_service(self) -> LLMService:
        if self.llm_service is None:
            self.llm_service = LLMService()
        return self.llm_service

    @property
    def chat_model(self):
        if self._chat_model is None:
            self._chat_model = self._get_llm_service().get_text_model()
        return self._chat_model

    @property
    def vision_model(self):
        if self._vision_model is None:
            self._vision_model = self._get_llm_service().get_vision_model()
        return self._vision_model

    async def generate_recipe(self, request: GenerateRequest) -> Recipe:
        """
        Generate a recipe for the requested dish

        Returns:
            Unsaved Recipe whose servings equal the requested servings

        Raises:
            ServerLimitReachedError: Rate limiting outlasted every retry
            AIServiceError: The model call failed
            ReplyParseError: The reply was not a recipe
        """
        messages = self.generate_prompt.format_messages(
            prompt=request.prompt,
            difficulty=request.difficulty,
            servings=request.servings,
            wishes=request.wishes or "Keine",
            format_instructions=RECIPE_FORMAT,
            json_only=JSON_ONLY
        )
        text = await self._invoke(self.chat_model, messages, RequestType.GENERATE)
        generated = self._parse(text, GeneratedRecipe, RequestType.GENERATE)

        # The model sometimes ignores the serving count; the stored baseline must match the request
        return Recipe(
            recipe_name=generated.recipe_name,
            description=generated.description,
            ingredients=generated.ingredients,
            instructions=generated.instructions,
            servings=request.servings,
            difficulty=request.difficulty,
            nutrition=generated.nutrition
        )

    async def scan_image(self, request: ImageScanRequest) -> ScanResult:
        """
        Analyze a photo of ingredients or of a written recipe

        The result may report isReadable=False; deciding what that means is
        left to the caller.
        """
        request_type = RequestType.OCR if request.mode == ScanMode.RECIPE else RequestType.SCAN_TO_RECIPE
        messages = [
            SystemMessage(content=ChefPrompts.get_scan_system_prompt(request.mode)),
            HumanMessage(content=[
                {"type": "text", "text": ChefPrompts.get_scan_question(request.mode)},
                {"type": "image_url", "image_url": {"url": f"data:{request.mime_type};base64,{request.image}"}},
            ])
        ]
        text = await self._invoke(self.vision_model, messages, request_type)
        return self._parse(text, ScanResult, request_type)

    async def handle(self, payload: Dict[str, Any]) -> Union[Recipe, ScanResult]:
        """
        Dispatch a typed request payload

        Args:
            payload: {"type": "generate" | "scan-to-recipe" | "ocr", ...}
        """
        try:
            request_type = RequestType(payload.get("type"))
        except ValueError:
            raise UnsupportedRequestError(payload.get("type"))

        if request_type == RequestType.GENERATE:
            return await self.generate_recipe(ChefRequest.model_validate(payload).to_generate_request())

        mode = ScanMode.RECIPE if request_type == RequestType.OCR else ScanMode.INGREDIENTS
        return await self.scan_image(ImageScanRequest(
            image=payload.get("image") or "",
            mime_type=payload.get("mimeType") or payload.get("mime_type") or "image/jpeg",
            mode=mode
        ))

    async def _invoke(self, model, messages: List[BaseMessage], request_type: RequestType) -> str:
        """Call the model under the retry policy and return the reply text"""
        attempts = 0

        async def _call():
            nonlocal attempts
            attempts += 1
            return await model.ainvoke(messages)

        start_time = time.time()
        logfire.info("ai_request_started", request_type=request_type.value)
        try:
            response = await with_retry_config(_call, self.retry_config, sleep=self._sleep)
        except ChefGatewayError as e:
            logfire.error("ai_request_failed", request_type=request_type.value, attempts=attempts, error=str(e))
            raise
        except Exception as e:
            logger.error(f"AI request '{request_type.value}' failed: {e}")
            logfire.error("ai_request_failed", request_type=request_type.value, attempts=attempts, error=str(e)[:200])
            raise AIServiceError(str(e)) from e

        logfire.info("ai_request_completed",
                     request_type=request_type.value,
                     attempts=attempts,
                     elapsed_ms=int((time.time() - start_time) * 1000))
        return reply_text(response)

    def _parse(self, text: str, model: Type[ReplyT], request_type: RequestType) -> ReplyT:
        """Parse a (possibly fenced) JSON reply and validate its shape"""
        # Strict json.loads: a truncated reply must fail instead of being closed off
        try:
            data = parse_json_markdown(text, parser=json.loads)
        except json.JSONDecodeError as e:
            logger.warning(f"Reply to '{request_type.value}' is not JSON: {text[:200]}")
            raise ReplyParseError(request_type.value, str(e)) from e

        if not isinstance(data, dict):
            raise ReplyParseError(request_type.value, f"expected a JSON object, got {type(data).__name__}")

        try:
            return model.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Reply to '{request_type.value}' has the wrong shape: {e.error_count()} error(s)")
            raise ReplyParseError(request_type.value, str(e)) from e
