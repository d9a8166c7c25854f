"""Tests for the AI summarization service."""

import random
from unittest.mock import AsyncMock, Mock, patch

import pytest

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
from git_suggest.ai.service import (
    BRIEF_STYLE,
    EMOJI_STYLE,
    LOGIN_REQUIRED,
    NO_EMOJI_STYLE,
    UNSUPPORTED_PROVIDER,
    AIService,
    Ready,
    Unavailable,
    fill_prompt,
)
from git_suggest.cloud import HttpClient
from git_suggest.config import AIConfigKey, MemoryConfigStore
from git_suggest.models import Hunk, KeyOption, MessageRole, ModelKind, PromptMessage
from git_suggest.notifications import NoticeLevel

TEMPLATE = [
    PromptMessage(
        role=MessageRole.SYSTEM, content=f"System sees {DIFF_PLACEHOLDER} untouched"
    ),
    PromptMessage(
        role=MessageRole.USER,
        content=f"{BRIEF_STYLE_PLACEHOLDER}|{EMOJI_STYLE_PLACEHOLDER}|{DIFF_PLACEHOLDER}",
    ),
    PromptMessage(role=MessageRole.ASSISTANT, content=f"{EMOJI_STYLE_PLACEHOLDER}"),
]


class StubClient(AIClient):
    """Client returning a fixed completion and recording prompts."""

    def __init__(self, response: str) -> None:
        self.response = response
        self.prompts = []

    @property
    def default_commit_template(self):
        return [PromptMessage(role=MessageRole.USER, content=f"commit {DIFF_PLACEHOLDER}")]

    @property
    def default_branch_template(self):
        return [PromptMessage(role=MessageRole.USER, content=f"branch {DIFF_PLACEHOLDER}")]

    async def evaluate(self, prompt):
        self.prompts.append(prompt)
        return self.response


def make_hunks() -> list[Hunk]:
    return [
        Hunk(file_path="src/app.py", diff="@@ -1 +1 @@\n-old\n+new"),
        Hunk(file_path="README.md", diff="@@ -3,0 +4 @@\n+docs"),
    ]


def make_service(values: dict[str, str] | None = None, notify=None) -> AIService:
    store = MemoryConfigStore({AIConfigKey[k].value: v for k, v in (values or {}).items()})
    return AIService(store, HttpClient(), notify=notify, rng=random.Random(0))


def with_stub(service: AIService, response: str) -> StubClient:
    stub = StubClient(response)
    service._select_client = Mock(return_value=Ready(stub))
    return stub


class TestBuildClient:
    """Test provider selection."""

    @pytest.mark.asyncio
    async def test_butler_api_without_token_is_unavailable(self):
        notices = []
        service = make_service(notify=notices.append)

        result = await service.build_client()

        assert isinstance(result, Unavailable)
        assert result.message == LOGIN_REQUIRED
        assert result.notice.level == NoticeLevel.ERROR
        assert notices == [result.notice]

    @pytest.mark.asyncio
    async def test_butler_api_with_token(self):
        service = make_service({"MODEL_PROVIDER": "anthropic"})

        result = await service.build_client("user-token")

        assert isinstance(result, Ready)
        assert isinstance(result.client, ButlerAIClient)
        assert result.client.model_kind == ModelKind.ANTHROPIC
        assert result.client.user_token == "user-token"
        assert result.client.cloud is service.cloud

    @pytest.mark.asyncio
    async def test_openai_own_key_missing(self):
        service = make_service({"OPENAI_KEY_OPTION": KeyOption.BRING_YOUR_OWN.value})

        result = await service.build_client("user-token")

        assert isinstance(result, Unavailable)
        assert "OpenAI" in result.message
        assert "must provide a valid token" in result.message

    @pytest.mark.asyncio
    async def test_openai_own_key_present(self):
        service = make_service(
            {
                "OPENAI_KEY_OPTION": KeyOption.BRING_YOUR_OWN.value,
                "OPENAI_KEY": "sk-test",
                "OPENAI_MODEL_NAME": "gpt-4o",
            }
        )

        result = await service.build_client()

        assert isinstance(result, Ready)
        assert isinstance(result.client, OpenAIClient)
        assert result.client.api_key == "sk-test"
        assert result.client.model_name == "gpt-4o"

    @pytest.mark.asyncio
    async def test_anthropic_own_key_missing_then_present(self):
        service = make_service(
            {
                "MODEL_PROVIDER": "anthropic",
                "ANTHROPIC_KEY_OPTION": KeyOption.BRING_YOUR_OWN.value,
            }
        )

        missing = await service.build_client()
        assert isinstance(missing, Unavailable)
        assert "Anthropic" in missing.message

        service.config.store.set(AIConfigKey.ANTHROPIC_KEY.value, "sk-ant")
        present = await service.build_client()
        assert isinstance(present, Ready)
        assert isinstance(present.client, AnthropicAIClient)
        assert present.client.model_name == "claude-3-haiku-20240307"

    @pytest.mark.asyncio
    async def test_ollama_is_always_available(self):
        service = make_service(
            {"MODEL_PROVIDER": "ollama", "OLLAMA_ENDPOINT": "http://gpu-box:11434"}
        )

        result = await service.build_client()

        assert isinstance(result, Ready)
        assert isinstance(result.client, OllamaClient)
        assert result.client.endpoint == "http://gpu-box:11434"
        assert result.client.model_name == "llama3"

    @pytest.mark.asyncio
    async def test_unsupported_provider(self):
        service = make_service({"MODEL_PROVIDER": "mistral"})

        result = await service.build_client("user-token")

        assert isinstance(result, Unavailable)
        assert result.message == UNSUPPORTED_PROVIDER

    @pytest.mark.asyncio
    async def test_validate_configuration(self):
        service = make_service()
        assert await service.validate_configuration() is False
        assert await service.validate_configuration("user-token") is True


class TestFillPrompt:
    def test_only_user_messages_are_filled(self):
        filled = fill_prompt(
            TEMPLATE,
            {DIFF_PLACEHOLDER: "D", BRIEF_STYLE_PLACEHOLDER: "B", EMOJI_STYLE_PLACEHOLDER: "E"},
        )

        assert filled[0] is TEMPLATE[0]
        assert filled[1].content == "B|E|D"
        assert filled[2] is TEMPLATE[2]
        assert [m.role for m in filled] == [m.role for m in TEMPLATE]

    def test_all_occurrences_replaced(self):
        prompt = [PromptMessage(role=MessageRole.USER, content="%{diff} and %{diff}")]
        assert fill_prompt(prompt, {DIFF_PLACEHOLDER: "x"})[0].content == "x and x"


class TestSummarizeCommit:
    """Test commit message generation."""

    @pytest.mark.asyncio
    async def test_unavailable_skips_backend(self):
        service = make_service()
        with patch("git_suggest.ai.service.build_diff") as mock_build_diff:
            result = await service.summarize_commit(make_hunks())

        assert isinstance(result, Unavailable)
        mock_build_diff.assert_not_called()

    @pytest.mark.asyncio
    async def test_brief_style_keeps_first_line(self):
        service = make_service()
        with_stub(service, "Fix bug\nMore detail here")

        result = await service.summarize_commit(make_hunks(), use_brief_style=True)

        assert result == "Fix bug"

    @pytest.mark.asyncio
    async def test_title_and_description_joined_by_blank_line(self):
        service = make_service()
        with_stub(service, "Fix bug\nMore detail here")

        result = await service.summarize_commit(make_hunks())

        assert result == "Fix bug\n\nMore detail here"

    @pytest.mark.asyncio
    async def test_title_only(self):
        service = make_service()
        with_stub(service, "Fix bug")
        assert await service.summarize_commit(make_hunks()) == "Fix bug"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("use_emoji_style", [True, False])
    async def test_emoji_placeholder_always_substituted(self, use_emoji_style):
        service = make_service()
        stub = with_stub(service, "Fix bug")

        await service.summarize_commit(
            make_hunks(), use_emoji_style=use_emoji_style, commit_template=TEMPLATE
        )

        user_content = stub.prompts[0][1].content
        assert EMOJI_STYLE_PLACEHOLDER not in user_content
        expected = EMOJI_STYLE if use_emoji_style else NO_EMOJI_STYLE
        assert f"|{expected}|" in user_content

    @pytest.mark.asyncio
    @pytest.mark.parametrize("use_brief_style", [True, False])
    async def test_brief_placeholder(self, use_brief_style):
        service = make_service()
        stub = with_stub(service, "Fix bug")

        await service.summarize_commit(
            make_hunks(), use_brief_style=use_brief_style, commit_template=TEMPLATE
        )

        user_content = stub.prompts[0][1].content
        assert BRIEF_STYLE_PLACEHOLDER not in user_content
        assert user_content.startswith(f"{BRIEF_STYLE}|" if use_brief_style else "|")

    @pytest.mark.asyncio
    async def test_custom_template_non_user_messages_untouched(self):
        service = make_service()
        stub = with_stub(service, "Fix bug")

        await service.summarize_commit(make_hunks(), commit_template=TEMPLATE)

        prompt = stub.prompts[0]
        assert prompt[0] == TEMPLATE[0]
        assert prompt[2] == TEMPLATE[2]
        assert "src/app.py - @@ -1 +1 @@" in prompt[1].content
        assert "README.md - @@ -3,0 +4 @@" in prompt[1].content

    @pytest.mark.asyncio
    async def test_default_template_from_client(self):
        service = make_service()
        stub = with_stub(service, "Fix bug")

        await service.summarize_commit(make_hunks())

        assert stub.prompts[0][0].content.startswith("commit ")

    @pytest.mark.asyncio
    async def test_diff_truncated_to_configured_limit(self):
        service = make_service(
            {"OPENAI_KEY_OPTION": KeyOption.BRING_YOUR_OWN.value, "DIFF_LENGTH_LIMIT": "10"}
        )
        stub = with_stub(service, "Fix bug")

        await service.summarize_commit(make_hunks())

        assert len(stub.prompts[0][0].content) == len("commit ") + 10

    @pytest.mark.asyncio
    async def test_butler_api_gets_at_least_floor(self):
        hunks = [Hunk(file_path="big.txt", diff="x" * 8000)]
        service = make_service({"DIFF_LENGTH_LIMIT": "10"})
        stub = with_stub(service, "Fix bug")

        await service.summarize_commit(hunks, user_token="user-token")

        assert len(stub.prompts[0][0].content) == len("commit ") + 5000

    @pytest.mark.asyncio
    async def test_backend_failure_propagates(self):
        service = make_service()
        stub = Mock(spec=AIClient)
        stub.default_commit_template = TEMPLATE
        stub.evaluate = AsyncMock(side_effect=ConnectionError("network down"))
        service._select_client = Mock(return_value=Ready(stub))

        with pytest.raises(ConnectionError, match="network down"):
            await service.summarize_commit(make_hunks())


class TestSummarizeBranch:
    """Test branch name generation."""

    @pytest.mark.asyncio
    async def test_spaces_and_newlines_become_dashes(self):
        service = make_service()
        with_stub(service, "add new\nfeature")

        assert await service.summarize_branch(make_hunks()) == "add-new-feature"

    @pytest.mark.asyncio
    async def test_consecutive_whitespace_not_collapsed(self):
        service = make_service()
        with_stub(service, "add  new\n\nfeature")

        assert await service.summarize_branch(make_hunks()) == "add--new--feature"

    @pytest.mark.asyncio
    async def test_only_diff_placeholder_substituted(self):
        service = make_service()
        stub = with_stub(service, "x")

        await service.summarize_branch(make_hunks(), branch_template=TEMPLATE)

        user_content = stub.prompts[0][1].content
        assert user_content.startswith(f"{BRIEF_STYLE_PLACEHOLDER}|{EMOJI_STYLE_PLACEHOLDER}|")
        assert DIFF_PLACEHOLDER not in user_content

    @pytest.mark.asyncio
    async def test_repeated_calls_give_identical_output(self):
        service = AIService(MemoryConfigStore(), HttpClient())
        with_stub(service, "fix login flow")

        first = await service.summarize_branch(make_hunks())
        second = await service.summarize_branch(make_hunks())

        assert first == second == "fix-login-flow"

    @pytest.mark.asyncio
    async def test_unavailable_without_token(self):
        service = make_service()
        result = await service.summarize_branch(make_hunks())
        assert isinstance(result, Unavailable)
        assert result.message == LOGIN_REQUIRED


class CountingStore(MemoryConfigStore):
    """Store that counts reads and can change a value once a snapshot was taken."""

    def __init__(self, values=None, later_values=None):
        super().__init__(values)
        self.reads = 0
        self.later_values = later_values or {}

    def get(self, key):
        self.reads += 1
        if self.reads > len(AIConfigKey) and key in self.later_values:
            return self.later_values[key]
        return super().get(key)


class TestConfigurationSnapshot:
    """Each call works from a single configuration snapshot."""

    @pytest.mark.asyncio
    async def test_store_read_once_per_setting(self):
        store = CountingStore()
        service = AIService(store, HttpClient())
        with patch.object(ButlerAIClient, "evaluate", new_callable=AsyncMock) as mock_evaluate:
            mock_evaluate.return_value = "fix-it"
            await service.summarize_branch(make_hunks(), user_token="user-token")

        assert store.reads == len(AIConfigKey)

    @pytest.mark.asyncio
    async def test_diff_limit_matches_client_snapshot(self):
        """A setting changing mid-call does not drop the Butler API floor."""
        store = CountingStore(
            {AIConfigKey.DIFF_LENGTH_LIMIT.value: "10"},
            later_values={AIConfigKey.OPENAI_KEY_OPTION.value: KeyOption.BRING_YOUR_OWN.value},
        )
        service = AIService(store, HttpClient())
        hunks = [Hunk(file_path="big.txt", diff="x" * 8000)]

        with patch.object(ButlerAIClient, "evaluate", new_callable=AsyncMock) as mock_evaluate:
            mock_evaluate.return_value = "Fix bug"
            result = await service.summarize_commit(hunks, user_token="user-token")

        assert result == "Fix bug"
        prompt = mock_evaluate.call_args[0][0]
        assert any("x" * 5000 in message.content for message in prompt)


class TestEmptyTemplates:
    """An explicitly empty template is sent as is."""

    @pytest.mark.asyncio
    async def test_empty_commit_template_kept(self):
        service = make_service()
        stub = with_stub(service, "Fix bug")

        await service.summarize_commit(make_hunks(), commit_template=[])

        assert stub.prompts == [[]]

    @pytest.mark.asyncio
    async def test_empty_branch_template_kept(self):
        service = make_service()
        stub = with_stub(service, "fix")

        await service.summarize_branch(make_hunks(), branch_template=[])

        assert stub.prompts == [[]]
