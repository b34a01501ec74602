from .llm_service import LLMService
from .ai_gateway import ChefGateway

__all__ = ['LLMService', 'ChefGateway']
