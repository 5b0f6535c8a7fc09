"""Configuration management commands."""

import httpx
import typer

from focusflow_cli.services.api.auth import AuthAPI
from focusflow_cli.services.api.client import APIClient
from focusflow_cli.services.config_service import get_config_service
from focusflow_cli.utils.exit_codes import ERROR_AUTH_FAILURE, ERROR_INVALID_ARGS, ERROR_STORAGE
from focusflow_cli.utils.typer_helpers import SuggestingGroup
from focusflow_cli.utils.ui.console import get_console
from focusflow_cli.utils.ui.formatters import (
    OUTPUT_FORMATS,
    format_info,
    format_output,
    format_success,
    format_warning,
)

from .decorators import AppError, command_wrapper

app = typer.Typer(cls=SuggestingGroup, help="Configuration management commands")
console = get_console()


def _error_message(response: httpx.Response) -> str:
    """Extract the server's error message, falling back to the status text."""
    try:
        return response.json()["message"]
    except (ValueError, KeyError, TypeError):
        return f"{response.status_code} {response.reason_phrase}"


@app.command("show")
@command_wrapper
def show_config(
    output: str = typer.Option("yaml", "--output", "-o", help="Output format"),
) -> None:
    """Show the current configuration."""
    if output not in OUTPUT_FORMATS:
        raise AppError(f"Invalid output format '{output}'", exit_code=ERROR_INVALID_ARGS)

    config_service = get_config_service()
    format_output(config_service.config.model_dump(), output)
    if output == "table":
        console.print(f"[dim]{config_service.config_path}[/dim]")


@app.command("set")
@command_wrapper
def set_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., timer.work_minutes)"),
    value: str = typer.Argument(..., help="Configuration value"),
) -> None:
    """Set a configuration value."""
    try:
        config = get_config_service().set_value(key, value)
    except ValueError as e:
        raise AppError(str(e), exit_code=ERROR_INVALID_ARGS) from e

    section, _, field = key.partition(".")
    new_value = getattr(getattr(config, section), field)
    format_success(f"Configuration '{key}' set to '{new_value}'")


@app.command("reset")
@command_wrapper
def reset_config(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Reset configuration to defaults."""
    if not yes:
        confirm = typer.confirm("Are you sure you want to reset the entire configuration?")
        if not confirm:
            format_info("Cancelled")
            raise typer.Exit(0)

    get_config_service().reset_config()
    format_success("Configuration reset to defaults")


@app.command("use")
@command_wrapper
def use_backend(
    backend: str = typer.Argument(..., help="Storage backend: local or remote"),
) -> None:
    """Switch where timer sessions are stored."""
    config_service = get_config_service()
    try:
        config = config_service.use_backend(backend)
    except ValueError as e:
        raise AppError(
            f"Unknown backend '{backend}'. Use 'local' or 'remote'.",
            exit_code=ERROR_INVALID_ARGS,
        ) from e

    format_success(f"Using {config.storage.backend} storage")
    if config.storage.backend == "remote":
        console.print(f"Endpoint: [cyan]{config.storage.endpoint}[/cyan]")
        if not config_service.load_credentials("remote"):
            format_warning("Not logged in. Run 'focusflow config login'.")


@app.command("login")
@command_wrapper
def login(
    email: str | None = typer.Option(None, "--email", help="Account email"),
    password: str | None = typer.Option(None, "--password", help="Account password"),
    cookie: str | None = typer.Option(
        None,
        "--cookie",
        help="Save an existing connect.sid session cookie instead of logging in",
    ),
) -> None:
    """Login to the FocusFlow server and save the session cookie."""
    config_service = get_config_service()

    if cookie is not None:
        cookie = cookie.strip()
        if not cookie:
            raise AppError("Session cookie cannot be empty", exit_code=ERROR_INVALID_ARGS)
        config_service.save_credentials(cookie, backend="remote")
        format_success("Session cookie saved")
        return

    if not email:
        email = typer.prompt("Email")
    if not password:
        password = typer.prompt("Password", hide_input=True)

    storage = config_service.config.storage
    with APIClient(storage.endpoint, timeout=storage.timeout, retry=storage.retry) as client:
        try:
            user, session_cookie = AuthAPI(client).login(email, password)
        except httpx.HTTPStatusError as e:
            raise AppError(
                f"Login failed: {_error_message(e.response)}",
                exit_code=ERROR_AUTH_FAILURE if e.response.status_code < 500 else ERROR_STORAGE,
            ) from e
        except (httpx.RequestError, RuntimeError) as e:
            raise AppError(f"Login failed: {e}", exit_code=ERROR_STORAGE) from e

    config_service.save_credentials(session_cookie, backend="remote")
    format_success(f"Logged in as {user.get('email', email)}")
    if config_service.config.storage.backend != "remote":
        format_info("Run 'focusflow config use remote' to store sessions on the server")


@app.command("logout")
@command_wrapper
def logout() -> None:
    """Forget the saved session cookie."""
    get_config_service().clear_credentials("remote")
    format_success("Session cookie removed")
