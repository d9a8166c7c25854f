"""Common contract for the AI provider clients.

Each provider client turns a prompt into a raw completion string. Clients do
not catch transport or vendor errors; those reach the caller unchanged.
"""

from abc import ABC, abstractmethod
from typing import Any

from git_suggest.models import Prompt


class LLMError(Exception):
    """Base exception for LLM-related errors."""

    pass


class LLMResponseError(LLMError):
    """Raised when a provider answers with a response we cannot read."""

    pass


class AIClient(ABC):
    """A backend able to complete a prompt."""

    @property
    @abstractmethod
    def default_commit_template(self) -> Prompt:
        """Prompt used for commit messages when the caller supplies none."""

    @property
    @abstractmethod
    def default_branch_template(self) -> Prompt:
        """Prompt used for branch names when the caller supplies none."""

    @abstractmethod
    async def evaluate(self, prompt: Prompt) -> str:
        """Send the prompt to the backend and return the raw completion.

        Args:
            prompt: Ordered conversation to send

        Returns:
            The completion text

        Raises:
            LLMResponseError: If the response carries no usable text
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}>"


def format_messages(prompt: Prompt) -> list[dict[str, Any]]:
    """Convert a prompt into the role/content dicts most chat APIs accept."""
    return [{"role": message.role.value, "content": message.content} for message in prompt]


def completion_text(response: Any) -> str:
    """Extract the text of the first choice of a chat completion response.

    Raises:
        LLMResponseError: If the response has no text content
    """
    try:
        content = response.choices[0].message.content
    except (AttributeError, IndexError, KeyError, TypeError) as e:
        raise LLMResponseError(f"Malformed completion response: {e}") from e

    if not isinstance(content, str):
        raise LLMResponseError("Empty response from model")
    return content
