"""Client for the hosted Butler API relay."""

import logging

from pydantic import BaseModel, ValidationError

from git_suggest.ai.client import AIClient, LLMResponseError, format_messages
from git_suggest.ai.prompts import SHORT_DEFAULT_BRANCH_TEMPLATE, SHORT_DEFAULT_COMMIT_TEMPLATE
from git_suggest.cloud import HttpClient
from git_suggest.models import ModelKind, Prompt

logger = logging.getLogger(__name__)

PREDICT_PATH = "evaluate_prompt/predict.json"
MAX_TOKENS = 400


class ButlerPrediction(BaseModel):
    """Response body of the predict endpoint."""

    message: str


class ButlerAIClient(AIClient):
    """Relays prompts through the Butler API using the user's session token.

    The relay holds the provider credentials; we only tell it which provider
    family to use.
    """

    def __init__(self, cloud: HttpClient, user_token: str, model_kind: ModelKind) -> None:
        self.cloud = cloud
        self.user_token = user_token
        self.model_kind = model_kind

    @property
    def default_commit_template(self) -> Prompt:
        return SHORT_DEFAULT_COMMIT_TEMPLATE

    @property
    def default_branch_template(self) -> Prompt:
        return SHORT_DEFAULT_BRANCH_TEMPLATE

    async def evaluate(self, prompt: Prompt) -> str:
        logger.debug(f"Evaluating {len(prompt)} messages via Butler API ({self.model_kind.value})")
        payload = await self.cloud.post(
            PREDICT_PATH,
            {
                "messages": format_messages(prompt),
                "max_tokens": MAX_TOKENS,
                "model_kind": self.model_kind.value,
            },
            token=self.user_token,
        )

        try:
            prediction = ButlerPrediction.model_validate(payload)
        except ValidationError as e:
            raise LLMResponseError(f"Malformed Butler API response: {e}") from e
        return prediction.message

    def __repr__(self) -> str:
        return f"<ButlerAIClient(model_kind='{self.model_kind.value}')>"
