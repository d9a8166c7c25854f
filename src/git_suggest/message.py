"""Commit message splitting."""

import re
from dataclasses import dataclass

_FIRST_BREAK = re.compile(r"\n+")


@dataclass(frozen=True)
class CommitMessage:
    """A commit message split into its title and description."""

    title: str
    description: str = ""

    def __str__(self) -> str:
        if self.description:
            return f"{self.title}\n\n{self.description}"
        return self.title


def split_message(message: str) -> CommitMessage:
    """Split a raw message at the first run of newlines.

    Everything before the break is the title, everything after it is the
    description.
    """
    parts = _FIRST_BREAK.split(message, maxsplit=1)
    title = parts[0]
    description = parts[1] if len(parts) > 1 else ""
    return CommitMessage(title=title, description=description)
