"""Client for a local Ollama inference server."""

import json
import logging

import httpx
from pydantic import BaseModel, ValidationError

from git_suggest.ai.client import AIClient, LLMResponseError, format_messages
from git_suggest.ai.prompts import LONG_DEFAULT_BRANCH_TEMPLATE, LONG_DEFAULT_COMMIT_TEMPLATE
from git_suggest.models import MessageRole, Prompt, PromptMessage

logger = logging.getLogger(__name__)

CHAT_PATH = "api/chat"

SYSTEM_PROMPT = PromptMessage(
    role=MessageRole.SYSTEM,
    content="""You are an expert in software development. Answer the given user prompts following the specified instructions.
Return your response in JSON and only use the following JSON schema:
{"result": "string"}""",
)


class OllamaChatMessage(BaseModel):
    role: str
    content: str


class OllamaChatResponse(BaseModel):
    """The parts of a non-streaming /api/chat response we read."""

    model: str | None = None
    message: OllamaChatMessage
    done: bool = True


class OllamaResult(BaseModel):
    result: str


class OllamaClient(AIClient):
    """Sends chat requests to an Ollama server; no credentials involved."""

    def __init__(
        self,
        endpoint: str,
        model_name: str,
        temperature: float = 1.0,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the Ollama client.

        Args:
            endpoint: Server base URL (e.g., "http://127.0.0.1:11434")
            model_name: Name of a model pulled into the server
            temperature: Sampling temperature passed to the model
            timeout: Request timeout in seconds, None waits indefinitely
            transport: Custom httpx transport
        """
        self.endpoint = endpoint
        self.model_name = model_name
        self.temperature = temperature
        self.timeout = timeout
        self._transport = transport

    @property
    def default_commit_template(self) -> Prompt:
        return LONG_DEFAULT_COMMIT_TEMPLATE

    @property
    def default_branch_template(self) -> Prompt:
        return LONG_DEFAULT_BRANCH_TEMPLATE

    @property
    def chat_url(self) -> str:
        return f"{self.endpoint.rstrip('/')}/{CHAT_PATH}"

    async def chat(self, prompt: Prompt) -> OllamaChatResponse:
        """Send a non-streaming chat request.

        Raises:
            httpx.HTTPStatusError: If the server answers with a non-2xx status
            LLMResponseError: If the body is not a chat response
        """
        body = {
            "model": self.model_name,
            "stream": False,
            "messages": format_messages(prompt),
            "format": "json",
            "options": {"temperature": self.temperature},
        }

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.post(self.chat_url, json=body)
        response.raise_for_status()

        try:
            return OllamaChatResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise LLMResponseError(f"Invalid Ollama chat response: {e}") from e

    async def evaluate(self, prompt: Prompt) -> str:
        logger.debug(f"Evaluating {len(prompt)} messages with Ollama model {self.model_name}")
        response = await self.chat([SYSTEM_PROMPT, *prompt])
        content = response.message.content

        try:
            return OllamaResult.model_validate(json.loads(content)).result
        except (json.JSONDecodeError, ValidationError) as e:
            raise LLMResponseError(f"Invalid response: {content}") from e

    def __repr__(self) -> str:
        return f"<OllamaClient(endpoint='{self.endpoint}', model_name='{self.model_name}')>"
