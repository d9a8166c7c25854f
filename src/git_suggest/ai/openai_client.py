"""Bring-your-own-key OpenAI client."""

import logging

import litellm
from litellm import acompletion

from git_suggest.ai.client import AIClient, completion_text, format_messages
from git_suggest.ai.prompts import LONG_DEFAULT_BRANCH_TEMPLATE, LONG_DEFAULT_COMMIT_TEMPLATE
from git_suggest.models import Prompt

logger = logging.getLogger(__name__)

MAX_TOKENS = 400


class OpenAIClient(AIClient):
    """Calls OpenAI chat completions with the user's own API key."""

    def __init__(self, api_key: str, model_name: str) -> None:
        """Initialize the client.

        Args:
            api_key: User-supplied OpenAI API key
            model_name: Chat model to use (e.g., "gpt-3.5-turbo")
        """
        self.api_key = api_key
        self.model_name = model_name

        litellm.drop_params = True  # Drop unsupported parameters gracefully

    @property
    def default_commit_template(self) -> Prompt:
        return LONG_DEFAULT_COMMIT_TEMPLATE

    @property
    def default_branch_template(self) -> Prompt:
        return LONG_DEFAULT_BRANCH_TEMPLATE

    async def evaluate(self, prompt: Prompt) -> str:
        logger.debug(f"Evaluating {len(prompt)} messages with OpenAI model {self.model_name}")
        response = await acompletion(
            model=self.model_name,
            messages=format_messages(prompt),
            max_tokens=MAX_TOKENS,
            api_key=self.api_key,
        )
        return completion_text(response)

    def __repr__(self) -> str:
        return f"<OpenAIClient(model_name='{self.model_name}')>"
