"""git-suggest - AI generated commit messages and branch names.

Library API for external projects:

    from git_suggest import AIService, Hunk, JsonConfigStore, Unavailable

    service = AIService(JsonConfigStore())
    message = await service.summarize_commit(
        [Hunk(file_path="app.py", diff="@@ -1 +1 @@\\n-old\\n+new")],
        use_brief_style=True,
    )
    if isinstance(message, Unavailable):
        print(message.notice.message)
"""

__version__ = "0.1.0"

from git_suggest.ai import AIService, LLMError, LLMResponseError, Ready, Unavailable
from git_suggest.config import (
    AIConfig,
    AIConfigKey,
    ConfigStore,
    GitConfigStore,
    JsonConfigStore,
    MemoryConfigStore,
)
from git_suggest.diff import build_diff
from git_suggest.message import CommitMessage, split_message
from git_suggest.models import (
    Hunk,
    KeyOption,
    MessageRole,
    ModelKind,
    Prompt,
    PromptMessage,
    ResolvedConfiguration,
)
from git_suggest.notifications import Notice, NoticeCallback

__all__ = [
    # Core API
    "AIService",
    "Ready",
    "Unavailable",
    # Configuration
    "AIConfig",
    "AIConfigKey",
    "ConfigStore",
    "GitConfigStore",
    "JsonConfigStore",
    "MemoryConfigStore",
    "ResolvedConfiguration",
    # Data
    "Hunk",
    "KeyOption",
    "MessageRole",
    "ModelKind",
    "Prompt",
    "PromptMessage",
    "CommitMessage",
    "Notice",
    "NoticeCallback",
    # Exceptions
    "LLMError",
    "LLMResponseError",
    # Helpers
    "build_diff",
    "split_message",
    # Metadata
    "__version__",
]
