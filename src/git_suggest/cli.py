"""Command-line interface for git-suggest."""

import asyncio
import logging
from enum import Enum
from pathlib import Path

import typer
from rich import print
from rich.console import Console
from rich.table import Table
from rich.text import Text

from git_suggest.ai.service import AIService, Unavailable
from git_suggest.cloud import DEFAULT_API_URL, HttpClient
from git_suggest.config import (
    SECRET_KEYS,
    AIConfig,
    AIConfigKey,
    ConfigStore,
    GitConfigStore,
    JsonConfigStore,
)
from git_suggest.git import GitError, read_hunks
from git_suggest.models import Hunk, Prompt
from git_suggest.notifications import Notice
from git_suggest.templates import load_prompt

app = typer.Typer(
    name="git-suggest",
    help="Suggest commit messages and branch names for your changes using AI",
    no_args_is_help=True,
)
config_app = typer.Typer(help="Read and change AI settings", no_args_is_help=True)
app.add_typer(config_app, name="config")

console = Console()


class StoreKind(str, Enum):
    FILE = "file"
    GIT = "git"


def _make_store(store: StoreKind) -> ConfigStore:
    if store == StoreKind.GIT:
        return GitConfigStore()
    return JsonConfigStore()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _show_notice(notice: Notice) -> None:
    console.print(f"[red]✗[/red] {notice.message}")


def _mask(key: str, value: str) -> str:
    if key in SECRET_KEYS and len(value) > 8:
        return f"{value[:4]}…{value[-4:]}"
    if key in SECRET_KEYS:
        return "****"
    return value


def _load_hunks(all_changes: bool) -> list[Hunk]:
    try:
        hunks = read_hunks(staged=not all_changes)
    except GitError as e:
        console.print(f"[red]Error reading changes: {e}[/red]")
        raise typer.Exit(1)

    if not hunks:
        console.print("[yellow]No changes to summarize[/yellow]")
        raise typer.Exit(1)
    return hunks


def _load_template(path: Path | None) -> Prompt | None:
    if path is None:
        return None
    try:
        return load_prompt(path)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


def _result_or_exit(result: str | Unavailable) -> str:
    if isinstance(result, Unavailable):
        raise typer.Exit(1)
    return result


StoreOption = typer.Option(
    StoreKind.FILE, "--store", help="Where settings are kept: file or git config"
)
UserTokenOption = typer.Option(
    None,
    "--user-token",
    envvar="GIT_SUGGEST_USER_TOKEN",
    help="Session token for the Butler API",
)
ApiUrlOption = typer.Option(
    DEFAULT_API_URL, "--api-url", envvar="GIT_SUGGEST_API_URL", help="Butler API base URL"
)
AllOption = typer.Option(
    False, "--all", "-a", help="Summarize all changes against HEAD instead of staged ones"
)
VerboseOption = typer.Option(False, "--verbose", "-v", help="Enable debug logging")
TemplateOption = typer.Option(
    None, "--template", "-t", help="YAML prompt template to use instead of the default"
)


@app.command()
def version() -> None:
    """Show the version and exit."""
    from git_suggest import __version__

    print(f"git-suggest {__version__}")


@app.command()
def commit(
    emoji: bool = typer.Option(False, "--emoji", help="Use GitMoji in the title"),
    brief: bool = typer.Option(False, "--brief", help="One sentence message"),
    template: Path | None = TemplateOption,
    user_token: str | None = UserTokenOption,
    api_url: str = ApiUrlOption,
    all_changes: bool = AllOption,
    store: StoreKind = StoreOption,
    verbose: bool = VerboseOption,
) -> None:
    """Suggest a commit message for the current changes."""
    _setup_logging(verbose)
    commit_template = _load_template(template)
    hunks = _load_hunks(all_changes)
    service = AIService(_make_store(store), HttpClient(api_url), notify=_show_notice)

    try:
        with console.status("[dim]Asking the model...[/dim]"):
            result = asyncio.run(
                service.summarize_commit(
                    hunks,
                    use_emoji_style=emoji,
                    use_brief_style=brief,
                    commit_template=commit_template,
                    user_token=user_token,
                )
            )
    except Exception as e:
        # Provider errors surface unchanged from the service
        console.print(f"[red]✗[/red] AI request failed: {e}")
        raise typer.Exit(1)

    console.print(_result_or_exit(result), markup=False, highlight=False)


@app.command()
def branch(
    template: Path | None = TemplateOption,
    user_token: str | None = UserTokenOption,
    api_url: str = ApiUrlOption,
    all_changes: bool = AllOption,
    store: StoreKind = StoreOption,
    verbose: bool = VerboseOption,
) -> None:
    """Suggest a branch name for the current changes."""
    _setup_logging(verbose)
    branch_template = _load_template(template)
    hunks = _load_hunks(all_changes)
    service = AIService(_make_store(store), HttpClient(api_url), notify=_show_notice)

    try:
        with console.status("[dim]Asking the model...[/dim]"):
            result = asyncio.run(
                service.summarize_branch(
                    hunks, branch_template=branch_template, user_token=user_token
                )
            )
    except Exception as e:
        # Provider errors surface unchanged from the service
        console.print(f"[red]✗[/red] AI request failed: {e}")
        raise typer.Exit(1)

    console.print(_result_or_exit(result), markup=False, highlight=False)


def _check_key(key: str) -> str:
    known = {item.value for item in AIConfigKey}
    if key not in known:
        raise typer.BadParameter(f"Unknown setting {key}. Known settings: {', '.join(sorted(known))}")
    return key


@config_app.command("get")
def config_get(
    key: str = typer.Argument(..., callback=_check_key, help="Setting name"),
    store: StoreKind = StoreOption,
) -> None:
    """Print a stored setting."""
    value = _make_store(store).get(key)
    if value is None:
        console.print(f"[dim]{key} is not set[/dim]")
        raise typer.Exit(1)
    console.print(value, markup=False, highlight=False)


@config_app.command("set")
def config_set(
    key: str = typer.Argument(..., callback=_check_key, help="Setting name"),
    value: str = typer.Argument(..., help="New value"),
    store: StoreKind = StoreOption,
) -> None:
    """Store a setting."""
    try:
        _make_store(store).set(key, value)
    except GitError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    console.print("[green]✓[/green] ", end="")
    console.print(f"{key} = {_mask(key, value)}", markup=False, highlight=False)


@config_app.command("unset")
def config_unset(
    key: str = typer.Argument(..., callback=_check_key, help="Setting name"),
    store: StoreKind = StoreOption,
) -> None:
    """Remove a setting so its default applies."""
    _make_store(store).unset(key)
    print(f"[green]✓[/green] {key} removed")


@config_app.command("show")
def config_show(
    user_token: str | None = UserTokenOption,
    store: StoreKind = StoreOption,
) -> None:
    """Show every setting and the resolved provider."""
    config_store = _make_store(store)

    table = Table(title="AI Settings", show_header=True, header_style="bold magenta")
    table.add_column("Setting", style="cyan", no_wrap=True)
    table.add_column("Stored value", style="green")
    for item in AIConfigKey:
        value = config_store.get(item.value)
        table.add_row(
            item.value,
            "[dim]default[/dim]" if value is None else Text(_mask(item.value, value)),
        )
    console.print(table)

    ai_config = AIConfig(config_store)
    resolved = ai_config.resolve()
    provider = resolved.model_kind.value if resolved.model_kind else "[red]unsupported[/red]"
    console.print(f"[white]Provider:[/white] [cyan]{provider}[/cyan]")
    console.print(f"[white]Using Butler API:[/white] {resolved.using_butler_api}")
    console.print(
        f"[white]Diff length limit:[/white] {resolved.diff_length_limit_considering_api}"
    )
    usable = ai_config.validate_configuration(user_token)
    status = "[green]usable[/green]" if usable else "[red]incomplete[/red]"
    console.print(f"[white]Configuration:[/white] {status}")


if __name__ == "__main__":
    app()
