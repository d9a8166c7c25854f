"""AI summarization service.

This module picks a provider client from the current configuration, builds a
prompt from the changed hunks and turns the completion into a commit message
or branch name.
"""

import logging
import random
from collections.abc import Sequence
from dataclasses import dataclass

from git_suggest.ai.anthropic_client import AnthropicAIClient
from git_suggest.ai.butler import ButlerAIClient
from git_suggest.ai.client import AIClient
from git_suggest.ai.ollama import OllamaClient
from git_suggest.ai.openai_client import OpenAIClient
from git_suggest.ai.prompts import (
    BRIEF_STYLE_PLACEHOLDER,
    DIFF_PLACEHOLDER,
    EMOJI_STYLE_PLACEHOLDER,
)
from git_suggest.cloud import HttpClient
from git_suggest.config import AIConfig, ConfigStore
from git_suggest.diff import build_diff
from git_suggest.message import split_message
from git_suggest.models import (
    Hunk,
    MessageRole,
    ModelKind,
    Prompt,
    PromptMessage,
    ResolvedConfiguration,
)
from git_suggest.notifications import Notice, NoticeCallback, Notifier

logger = logging.getLogger(__name__)

BRIEF_STYLE = "The commit message must be only one sentence and as short as possible."
EMOJI_STYLE = "Make use of GitMoji in the title prefix."
NO_EMOJI_STYLE = "Don't use any emoji."

LOGIN_REQUIRED = "When using the Butler API to summarize code, you must be logged in"
UNSUPPORTED_PROVIDER = "Unsupported AI model provider configured"


def missing_key_message(provider: str) -> str:
    return (
        f"When using {provider} in a bring your own key configuration, "
        "you must provide a valid token"
    )


@dataclass(frozen=True)
class Ready:
    """A client was built and can be evaluated."""

    client: AIClient


@dataclass(frozen=True)
class Unavailable:
    """No client could be built; ``notice`` tells the user why."""

    notice: Notice

    @property
    def message(self) -> str:
        return self.notice.message


ClientResult = Ready | Unavailable


def fill_prompt(prompt: Prompt, replacements: dict[str, str]) -> Prompt:
    """Substitute placeholders in the user messages of a prompt.

    System and assistant messages are passed through untouched.
    """
    filled: Prompt = []
    for message in prompt:
        if message.role != MessageRole.USER:
            filled.append(message)
            continue

        content = message.content
        for placeholder, value in replacements.items():
            content = content.replace(placeholder, value)
        filled.append(PromptMessage(role=MessageRole.USER, content=content))
    return filled


class AIService:
    """Orchestrates the configuration → client → prompt → completion pipeline.

    Nothing is cached between calls: every operation reads the configuration
    store and builds its client afresh.
    """

    def __init__(
        self,
        store: ConfigStore,
        cloud: HttpClient | None = None,
        notify: NoticeCallback | None = None,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the AI service.

        Args:
            store: Configuration store holding the AI settings
            cloud: HTTP transport for the Butler API (creates default if None)
            notify: Callback receiving user-visible notices
            rng: Randomness source for diff shuffling
        """
        self.config = AIConfig(store)
        self.cloud = cloud or HttpClient()
        self.notifier = Notifier(notify)
        self.rng = rng

    async def validate_configuration(self, user_token: str | None = None) -> bool:
        """Check whether a client could be built right now."""
        return self.config.validate_configuration(user_token)

    async def build_client(self, user_token: str | None = None) -> ClientResult:
        """Build the client for the active provider.

        Args:
            user_token: Session token, required when using the Butler API

        Returns:
            Ready with the client, or Unavailable with a notice for the user
        """
        return self._select_client(self.config.resolve(), user_token)

    def _select_client(
        self, config: ResolvedConfiguration, user_token: str | None
    ) -> ClientResult:
        model_kind = config.model_kind

        if model_kind is None:
            return Unavailable(self.notifier.error(UNSUPPORTED_PROVIDER))

        if config.using_butler_api:
            if not user_token:
                return Unavailable(self.notifier.error(LOGIN_REQUIRED))
            return Ready(ButlerAIClient(self.cloud, user_token, model_kind))

        if model_kind == ModelKind.OLLAMA:
            return Ready(OllamaClient(config.ollama_endpoint, config.ollama_model_name))

        if model_kind == ModelKind.OPENAI:
            if not config.openai_key:
                return Unavailable(
                    self.notifier.error(missing_key_message("OpenAI"), provider="openai")
                )
            return Ready(OpenAIClient(config.openai_key, config.openai_model_name))

        if model_kind == ModelKind.ANTHROPIC:
            if not config.anthropic_key:
                return Unavailable(
                    self.notifier.error(missing_key_message("Anthropic"), provider="anthropic")
                )
            return Ready(AnthropicAIClient(config.anthropic_key, config.anthropic_model_name))

        return Unavailable(self.notifier.error(UNSUPPORTED_PROVIDER))

    async def _prepare(
        self, hunks: Sequence[Hunk], user_token: str | None
    ) -> tuple[AIClient, str] | Unavailable:
        config = self.config.resolve()
        result = self._select_client(config, user_token)
        if isinstance(result, Unavailable):
            logger.info(f"AI summarization unavailable: {result.message}")
            return result

        limit = config.diff_length_limit_considering_api
        diff = build_diff(hunks, limit, self.rng)
        logger.debug(f"Built diff of {len(diff)} chars from {len(hunks)} hunks (limit {limit})")
        return result.client, diff

    async def summarize_commit(
        self,
        hunks: Sequence[Hunk],
        use_emoji_style: bool = False,
        use_brief_style: bool = False,
        commit_template: Prompt | None = None,
        user_token: str | None = None,
    ) -> str | Unavailable:
        """Generate a commit message for the given hunks.

        Args:
            hunks: Changes to describe
            use_emoji_style: Ask for a GitMoji title prefix
            use_brief_style: Ask for a one sentence message and keep only its first line
            commit_template: Prompt to use instead of the client's default
            user_token: Session token for the Butler API

        Returns:
            The commit message, or Unavailable if no client could be built
        """
        prepared = await self._prepare(hunks, user_token)
        if isinstance(prepared, Unavailable):
            return prepared
        client, diff = prepared

        prompt = fill_prompt(
            commit_template if commit_template is not None else client.default_commit_template,
            {
                DIFF_PLACEHOLDER: diff,
                BRIEF_STYLE_PLACEHOLDER: BRIEF_STYLE if use_brief_style else "",
                EMOJI_STYLE_PLACEHOLDER: EMOJI_STYLE if use_emoji_style else NO_EMOJI_STYLE,
            },
        )

        message = await client.evaluate(prompt)
        logger.info(f"Commit message generated with {client!r}")

        if use_brief_style:
            message = message.split("\n")[0]

        return str(split_message(message))

    async def summarize_branch(
        self,
        hunks: Sequence[Hunk],
        branch_template: Prompt | None = None,
        user_token: str | None = None,
    ) -> str | Unavailable:
        """Generate a branch name for the given hunks.

        Spaces and newlines in the completion become dashes; runs of them are
        not collapsed.

        Returns:
            The branch name, or Unavailable if no client could be built
        """
        prepared = await self._prepare(hunks, user_token)
        if isinstance(prepared, Unavailable):
            return prepared
        client, diff = prepared

        prompt = fill_prompt(
            branch_template if branch_template is not None else client.default_branch_template,
            {DIFF_PLACEHOLDER: diff},
        )

        message = await client.evaluate(prompt)
        logger.info(f"Branch name generated with {client!r}")

        return message.replace(" ", "-").replace("\n", "-")
