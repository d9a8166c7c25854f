"""Loading custom prompt templates from YAML files.

A template file holds either a list of messages or a mapping with a
``messages`` list:

    messages:
      - role: system
        content: You write terse commit messages.
      - role: user
        content: |
          Describe this change. %{emoji_style}
          %{diff}
"""

import logging
from pathlib import Path

import yaml
from pydantic import TypeAdapter, ValidationError

from git_suggest.models import Prompt, PromptMessage

logger = logging.getLogger(__name__)

_PROMPT_ADAPTER = TypeAdapter(list[PromptMessage])


def load_prompt(yaml_path: Path) -> Prompt:
    """Load and validate a prompt template.

    Args:
        yaml_path: Path to YAML file

    Returns:
        The messages, in file order

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the YAML is invalid or not a list of role/content messages
    """
    if not yaml_path.exists():
        raise FileNotFoundError(f"Prompt template not found: {yaml_path}")

    try:
        with open(yaml_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {yaml_path}: {e}") from e

    if isinstance(data, dict):
        data = data.get("messages")

    if not isinstance(data, list) or not data:
        raise ValueError(f"Prompt template must contain a non-empty message list in {yaml_path}")

    try:
        prompt = _PROMPT_ADAPTER.validate_python(data)
    except ValidationError as e:
        raise ValueError(f"Invalid prompt message in {yaml_path}: {e}") from e

    logger.info(f"Loaded prompt template with {len(prompt)} messages from {yaml_path.name}")
    return prompt
