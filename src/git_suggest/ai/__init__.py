"""AI integration module for git-suggest.

Provider clients for the Butler API relay, OpenAI, Anthropic and Ollama,
plus the service that turns hunks into commit messages and branch names.
"""

from .anthropic_client import AnthropicAIClient
from .butler import ButlerAIClient
from .client import AIClient, LLMError, LLMResponseError
from .ollama import OllamaClient
from .openai_client import OpenAIClient
from .service import AIService, ClientResult, Ready, Unavailable

__all__ = [
    "AIClient",
    "AIService",
    "AnthropicAIClient",
    "ButlerAIClient",
    "ClientResult",
    "LLMError",
    "LLMResponseError",
    "OllamaClient",
    "OpenAIClient",
    "Ready",
    "Unavailable",
]
