"""Configuration stores and the AI settings resolver for git-suggest."""

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Any, Protocol, TypeVar

from git_suggest.git import run_git
from git_suggest.models import (
    DEFAULT_DIFF_LENGTH_LIMIT,
    DEFAULT_OLLAMA_ENDPOINT,
    DEFAULT_OLLAMA_MODEL_NAME,
    AnthropicModelName,
    KeyOption,
    ModelKind,
    OpenAIModelName,
    ResolvedConfiguration,
)

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


class AIConfigKey(str, Enum):
    """Names of the settings read by the resolver."""

    MODEL_PROVIDER = "gitsuggest.aiModelProvider"
    OPENAI_KEY_OPTION = "gitsuggest.aiOpenAIKeyOption"
    OPENAI_MODEL_NAME = "gitsuggest.aiOpenAIModelName"
    OPENAI_KEY = "gitsuggest.aiOpenAIKey"
    ANTHROPIC_KEY_OPTION = "gitsuggest.aiAnthropicKeyOption"
    ANTHROPIC_MODEL_NAME = "gitsuggest.aiAnthropicModelName"
    ANTHROPIC_KEY = "gitsuggest.aiAnthropicKey"
    DIFF_LENGTH_LIMIT = "gitsuggest.diffLengthLimit"
    OLLAMA_ENDPOINT = "gitsuggest.aiOllamaEndpoint"
    OLLAMA_MODEL_NAME = "gitsuggest.aiOllamaModelName"


SECRET_KEYS = frozenset({AIConfigKey.OPENAI_KEY.value, AIConfigKey.ANTHROPIC_KEY.value})


class ConfigStore(Protocol):
    """Key/value storage the resolver reads from."""

    def get(self, key: str) -> str | None: ...

    def get_with_default(self, key: str, default: str) -> str: ...

    def set(self, key: str, value: str) -> None: ...

    def unset(self, key: str) -> None: ...


class MemoryConfigStore:
    """Dictionary-backed store, mostly useful for embedding and tests."""

    def __init__(self, values: dict[str, str] | None = None) -> None:
        self.values: dict[str, str] = dict(values or {})

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def get_with_default(self, key: str, default: str) -> str:
        value = self.get(key)
        return default if value is None else value

    def set(self, key: str, value: str) -> None:
        self.values[key] = value

    def unset(self, key: str) -> None:
        self.values.pop(key, None)


class JsonConfigStore:
    """Store settings in a JSON file under the user's home directory."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize the store.

        Args:
            config_dir: Directory holding config.json, ``~/.git-suggest`` if None
        """
        self.config_dir = config_dir or Path.home() / ".git-suggest"
        self.config_file = self.config_dir / "config.json"

    def _ensure_config_dir(self) -> None:
        """Create config directory if it doesn't exist."""
        self.config_dir.mkdir(parents=True, exist_ok=True)
        # API keys live here
        self.config_dir.chmod(0o700)

    def _load_config(self) -> dict[str, Any]:
        """Load existing config or return empty dict."""
        if not self.config_file.exists():
            return {}

        try:
            with self.config_file.open() as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError):
            logger.warning(f"Ignoring unreadable config file {self.config_file}")
            return {}

        return data if isinstance(data, dict) else {}

    def _save_config(self, config_data: dict[str, Any]) -> None:
        self._ensure_config_dir()
        with self.config_file.open("w") as f:
            json.dump(config_data, f, indent=2)
        self.config_file.chmod(0o600)

    def get(self, key: str) -> str | None:
        value = self._load_config().get(key)
        return None if value is None else str(value)

    def get_with_default(self, key: str, default: str) -> str:
        value = self.get(key)
        return default if value is None else value

    def set(self, key: str, value: str) -> None:
        config_data = self._load_config()
        config_data[key] = value
        self._save_config(config_data)

    def unset(self, key: str) -> None:
        config_data = self._load_config()
        if config_data.pop(key, None) is None:
            return

        if config_data:
            self._save_config(config_data)
        else:
            # Remove empty config file
            self.config_file.unlink(missing_ok=True)

    def items(self) -> dict[str, str]:
        """Return every stored setting."""
        return {key: str(value) for key, value in self._load_config().items()}


class GitConfigStore:
    """Store settings in git config, read with the usual scope precedence."""

    def __init__(self, cwd: str | None = None, global_scope: bool = True) -> None:
        """Initialize the store.

        Args:
            cwd: Repository directory used for reads and local writes
            global_scope: Write to the user's global config instead of the repository
        """
        self.cwd = cwd
        self.global_scope = global_scope

    def _scope(self) -> list[str]:
        return ["--global"] if self.global_scope else ["--local"]

    def get(self, key: str) -> str | None:
        completed = run_git(["config", "--get", key], cwd=self.cwd, check=False)
        if completed.returncode != 0:
            # Exit code 1 means the key is not set
            return None
        return completed.stdout.rstrip("\n")

    def get_with_default(self, key: str, default: str) -> str:
        value = self.get(key)
        return default if value is None else value

    def set(self, key: str, value: str) -> None:
        run_git(["config", *self._scope(), key, value], cwd=self.cwd)

    def unset(self, key: str) -> None:
        run_git(["config", *self._scope(), "--unset", key], cwd=self.cwd, check=False)


def _parse_enum(enum_type: type[E], value: str | None) -> E | None:
    if value is None:
        return None
    try:
        return enum_type(value)
    except ValueError:
        return None


class AIConfig:
    """Typed, read-through view of the AI settings held in a ConfigStore.

    Every getter reads the store afresh and falls back to a default when the
    setting is absent or unusable; nothing here raises for stored values.
    """

    def __init__(self, store: ConfigStore) -> None:
        self.store = store

    def _get(self, key: AIConfigKey) -> str | None:
        value = self.store.get(key.value)
        # Empty strings count as unset
        return value or None

    def _key_option(self, key: AIConfigKey) -> KeyOption:
        option = _parse_enum(KeyOption, self._get(key))
        return option or KeyOption.BUTLER_API

    def model_kind(self) -> ModelKind | None:
        """Active provider, or None when the stored provider is unsupported."""
        value = self._get(AIConfigKey.MODEL_PROVIDER) or ModelKind.OPENAI.value
        kind = _parse_enum(ModelKind, value)
        if kind is None:
            logger.warning(f"Unsupported AI model provider configured: {value!r}")
        return kind

    def openai_key_option(self) -> KeyOption:
        return self._key_option(AIConfigKey.OPENAI_KEY_OPTION)

    def openai_key(self) -> str | None:
        return self._get(AIConfigKey.OPENAI_KEY)

    def openai_model_name(self) -> str:
        return self._get(AIConfigKey.OPENAI_MODEL_NAME) or OpenAIModelName.GPT35_TURBO.value

    def anthropic_key_option(self) -> KeyOption:
        return self._key_option(AIConfigKey.ANTHROPIC_KEY_OPTION)

    def anthropic_key(self) -> str | None:
        return self._get(AIConfigKey.ANTHROPIC_KEY)

    def anthropic_model_name(self) -> str:
        return self._get(AIConfigKey.ANTHROPIC_MODEL_NAME) or AnthropicModelName.HAIKU.value

    def ollama_endpoint(self) -> str:
        return self._get(AIConfigKey.OLLAMA_ENDPOINT) or DEFAULT_OLLAMA_ENDPOINT

    def ollama_model_name(self) -> str:
        return self._get(AIConfigKey.OLLAMA_MODEL_NAME) or DEFAULT_OLLAMA_MODEL_NAME

    def diff_length_limit(self) -> int:
        """Configured diff length limit.

        Values that are not a non-negative integer fall back to the default.
        """
        value = self.store.get_with_default(
            AIConfigKey.DIFF_LENGTH_LIMIT.value, str(DEFAULT_DIFF_LENGTH_LIMIT)
        )
        try:
            limit = int(value.strip())
        except ValueError:
            logger.debug(f"Unparsable diff length limit {value!r}, using default")
            return DEFAULT_DIFF_LENGTH_LIMIT

        if limit < 0:
            logger.debug(f"Negative diff length limit {limit}, using default")
            return DEFAULT_DIFF_LENGTH_LIMIT
        return limit

    def resolve(self) -> ResolvedConfiguration:
        """Take a snapshot of every AI setting."""
        return ResolvedConfiguration(
            model_kind=self.model_kind(),
            openai_key_option=self.openai_key_option(),
            openai_model_name=self.openai_model_name(),
            openai_key=self.openai_key(),
            anthropic_key_option=self.anthropic_key_option(),
            anthropic_model_name=self.anthropic_model_name(),
            anthropic_key=self.anthropic_key(),
            ollama_endpoint=self.ollama_endpoint(),
            ollama_model_name=self.ollama_model_name(),
            diff_length_limit=self.diff_length_limit(),
        )

    def using_butler_api(self) -> bool:
        """True iff the active provider's key option is the Butler API."""
        return self.resolve().using_butler_api

    def diff_length_limit_considering_api(self) -> int:
        """Diff length limit, never below the API floor when using the Butler API."""
        return self.resolve().diff_length_limit_considering_api

    def validate_configuration(self, user_token: str | None = None) -> bool:
        """Check whether the active provider has everything it needs.

        Args:
            user_token: Session token for the Butler API

        Returns:
            True if a client could be built from the current settings
        """
        config = self.resolve()
        return is_configuration_usable(config, user_token)


def is_configuration_usable(
    config: ResolvedConfiguration, user_token: str | None = None
) -> bool:
    """Check a configuration snapshot for missing credentials."""
    if config.using_butler_api:
        return bool(user_token)

    if config.model_kind == ModelKind.OPENAI:
        return bool(config.openai_key)
    if config.model_kind == ModelKind.ANTHROPIC:
        return bool(config.anthropic_key)
    if config.model_kind == ModelKind.OLLAMA:
        return bool(config.ollama_endpoint) and bool(config.ollama_model_name)
    return False
