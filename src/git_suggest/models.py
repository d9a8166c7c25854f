"""Pydantic models for hunks, prompts and resolved AI configuration."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

MAX_DIFF_LENGTH_LIMIT_FOR_API = 5000
DEFAULT_DIFF_LENGTH_LIMIT = 5000
DEFAULT_OLLAMA_ENDPOINT = "http://127.0.0.1:11434"
DEFAULT_OLLAMA_MODEL_NAME = "llama3"


class Hunk(BaseModel):
    """A single file-scoped change fragment."""

    model_config = ConfigDict(frozen=True)

    file_path: str
    diff: str


class MessageRole(str, Enum):
    """Role of a message in a prompt conversation."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class PromptMessage(BaseModel):
    """A role-tagged prompt fragment, possibly containing placeholders."""

    model_config = ConfigDict(frozen=True)

    role: MessageRole
    content: str


# Ordered conversation history sent to the model
Prompt = list[PromptMessage]


class ModelKind(str, Enum):
    """Supported AI model providers."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    OLLAMA = "ollama"


class KeyOption(str, Enum):
    """Whether a provider is reached with the user's key or through the Butler API."""

    BRING_YOUR_OWN = "bringYourOwn"
    BUTLER_API = "butlerAPI"


class OpenAIModelName(str, Enum):
    GPT35_TURBO = "gpt-3.5-turbo"
    GPT4 = "gpt-4"
    GPT4_TURBO = "gpt-4-turbo-preview"
    GPT4O = "gpt-4o"


class AnthropicModelName(str, Enum):
    HAIKU = "claude-3-haiku-20240307"
    SONNET = "claude-3-sonnet-20240229"
    OPUS = "claude-3-opus-20240229"


class ResolvedConfiguration(BaseModel):
    """Request-scoped snapshot of every AI setting.

    ``model_kind`` is ``None`` when the stored provider is not one of the
    supported kinds.
    """

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    model_kind: ModelKind | None
    openai_key_option: KeyOption = KeyOption.BUTLER_API
    openai_model_name: str = OpenAIModelName.GPT35_TURBO.value
    openai_key: str | None = None
    anthropic_key_option: KeyOption = KeyOption.BUTLER_API
    anthropic_model_name: str = AnthropicModelName.HAIKU.value
    anthropic_key: str | None = None
    ollama_endpoint: str = DEFAULT_OLLAMA_ENDPOINT
    ollama_model_name: str = DEFAULT_OLLAMA_MODEL_NAME
    diff_length_limit: int = Field(default=DEFAULT_DIFF_LENGTH_LIMIT, ge=0)

    @property
    def using_butler_api(self) -> bool:
        """True when the active provider is routed through the Butler API."""
        if self.model_kind == ModelKind.OPENAI:
            return self.openai_key_option == KeyOption.BUTLER_API
        if self.model_kind == ModelKind.ANTHROPIC:
            return self.anthropic_key_option == KeyOption.BUTLER_API
        return False

    @property
    def diff_length_limit_considering_api(self) -> int:
        """Diff length limit, raised to the API floor when using the Butler API."""
        if self.using_butler_api:
            return max(MAX_DIFF_LENGTH_LIMIT_FOR_API, self.diff_length_limit)
        return self.diff_length_limit
