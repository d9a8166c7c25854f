"""Bring-your-own-key Anthropic client."""

import logging

import litellm
from litellm import acompletion

from git_suggest.ai.client import AIClient, completion_text, format_messages
from git_suggest.ai.prompts import SHORT_DEFAULT_BRANCH_TEMPLATE, SHORT_DEFAULT_COMMIT_TEMPLATE
from git_suggest.models import Prompt

logger = logging.getLogger(__name__)

MAX_TOKENS = 1024


class AnthropicAIClient(AIClient):
    """Calls the Anthropic messages API with the user's own API key."""

    def __init__(self, api_key: str, model_name: str) -> None:
        """Initialize the client.

        Args:
            api_key: User-supplied Anthropic API key
            model_name: Claude model to use (e.g., "claude-3-haiku-20240307")
        """
        self.api_key = api_key
        self.model_name = model_name

        litellm.drop_params = True

    @property
    def default_commit_template(self) -> Prompt:
        return SHORT_DEFAULT_COMMIT_TEMPLATE

    @property
    def default_branch_template(self) -> Prompt:
        return SHORT_DEFAULT_BRANCH_TEMPLATE

    @property
    def litellm_model(self) -> str:
        return f"anthropic/{self.model_name}"

    async def evaluate(self, prompt: Prompt) -> str:
        logger.debug(f"Evaluating {len(prompt)} messages with Anthropic model {self.model_name}")
        response = await acompletion(
            model=self.litellm_model,
            messages=format_messages(prompt),
            max_tokens=MAX_TOKENS,
            api_key=self.api_key,
        )
        return completion_text(response)

    def __repr__(self) -> str:
        return f"<AnthropicAIClient(model_name='{self.model_name}')>"
