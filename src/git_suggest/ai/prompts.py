"""Default prompt templates.

User messages may contain the placeholders ``%{diff}``, ``%{brief_style}`` and
``%{emoji_style}``, which the service fills in before evaluation.
"""

from git_suggest.models import MessageRole, Prompt, PromptMessage

DIFF_PLACEHOLDER = "%{diff}"
BRIEF_STYLE_PLACEHOLDER = "%{brief_style}"
EMOJI_STYLE_PLACEHOLDER = "%{emoji_style}"

_EXAMPLE_DIFF = """src/utils/typing.ts - @@ -35,3 +35,10 @@
 export function isNonEmptyObject(something: unknown): something is UnknownObject {
 \treturn isUnknownObject(something) && Object.keys(something).length > 0;
 }
+
+export function isArrayOf<T>(
+\tsomething: unknown,
+\ttest: (value: unknown) => value is T
+): something is T[] {
+\treturn Array.isArray(something) && something.every(test);
+}"""

SHORT_DEFAULT_COMMIT_TEMPLATE: Prompt = [
    PromptMessage(
        role=MessageRole.USER,
        content=f"""Please could you write a commit message for my changes.
Only respond with the commit message. Don't give any notes.
Explain what were the changes and why the changes were done.
Focus the most important changes.
Use the present tense.
Use a semantic commit prefix.
Hard wrap lines at 72 characters.
Ensure the title is only 50 characters.
Do not start any lines with the hash symbol.
{BRIEF_STYLE_PLACEHOLDER}
{EMOJI_STYLE_PLACEHOLDER}

Here is my git diff:
```
{DIFF_PLACEHOLDER}
```
""",
    ),
]

LONG_DEFAULT_COMMIT_TEMPLATE: Prompt = [
    PromptMessage(
        role=MessageRole.USER,
        content=f"""Please could you write a commit message for my changes.
Explain what were the changes and why the changes were done.
Focus the most important changes.
Use the present tense.
Use a semantic commit prefix.
Hard wrap lines at 72 characters.
Ensure the title is only 50 characters.
Do not start any lines with the hash symbol.
Only respond with the commit message.

Here is my git diff:
```
{_EXAMPLE_DIFF}
```
""",
    ),
    PromptMessage(
        role=MessageRole.ASSISTANT,
        content="""Typing utilities: Check for array of type

Added an utility function to check whether a given value is an array of a
specific type.""",
    ),
    *SHORT_DEFAULT_COMMIT_TEMPLATE,
]

SHORT_DEFAULT_BRANCH_TEMPLATE: Prompt = [
    PromptMessage(
        role=MessageRole.USER,
        content=f"""Please could you write a branch name for my changes.
A branch name represent a brief description of the changes in the diff (branch).
Branch names should contain no whitespace and instead use dashes to separate words.
Branch names should contain a maximum of 5 words.
Only respond with the branch name.

Here is my git diff:
```
{DIFF_PLACEHOLDER}
```
""",
    ),
]

LONG_DEFAULT_BRANCH_TEMPLATE: Prompt = [
    PromptMessage(
        role=MessageRole.USER,
        content=f"""Please could you write a branch name for my changes.
A branch name represent a brief description of the changes in the diff (branch).
Branch names should contain no whitespace and instead use dashes to separate words.
Branch names should contain a maximum of 5 words.
Only respond with the branch name.

Here is my git diff:
```
{_EXAMPLE_DIFF}
```
""",
    ),
    PromptMessage(role=MessageRole.ASSISTANT, content="utils-typing-is-array-of-type"),
    *SHORT_DEFAULT_BRANCH_TEMPLATE,
]
