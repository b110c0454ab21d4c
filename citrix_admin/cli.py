"""citrix-admin command line entry point."""

import asyncio
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from .core.exceptions import (
    AuthenticationFailure,
    DirectoryQueryError,
    OperationCancelled,
    SecretOperationError,
    UnsupportedPlatformError,
)
from .dependencies import (
    get_certificate_store,
    get_cms_cipher,
    get_credential_vault,
    get_drive_mapping_service,
    get_log_viewer,
    get_profile_cleanup_service,
    get_settings,
)
from .logging_config import LogSession
from .models import AttemptResult, CleanupResult

app = typer.Typer(no_args_is_help=True, add_completion=False, help="Citrix / Windows admin scripts")
vault_app = typer.Typer(no_args_is_help=True, help="Credential vault entries")
app.add_typer(vault_app, name="vault")

console = Console()


def _mapping_table(results: List[AttemptResult]) -> Table:
    table = Table(title="Drive mappings")
    table.add_column("Drive", style="cyan", no_wrap=True)
    table.add_column("Remote path", style="white")
    table.add_column("Status")
    table.add_column("Code", justify="right")
    table.add_column("Message", style="dim")
    for result in results:
        status = "[green]OK[/]" if result.success else "[red]FAILED[/]"
        table.add_row(result.target.drive, result.target.remote_path, status, str(result.code), result.message)
    return table


def _cleanup_table(results: List[CleanupResult], dry_run: bool) -> Table:
    table = Table(title="Profile cleanup" + (" (dry run)" if dry_run else ""))
    table.add_column("Folder", style="white")
    table.add_column("Status", no_wrap=True)
    table.add_column("Freed (MB)", justify="right", style="yellow")
    table.add_column("Error", style="dim")
    for result in results:
        if not result.deleted:
            status = "[red]FAILED[/]"
        elif dry_run:
            status = "[yellow]WOULD DELETE[/]"
        else:
            status = "[green]DELETED[/]"
        table.add_row(result.path, status, f"{result.freed_bytes / (1024 * 1024):,.1f}", result.error or "")
    return table


@app.command("map-drives")
def map_drives(
    gui: Optional[bool] = typer.Option(None, "--gui/--console", help="Credential prompt front end"),
) -> None:
    """Ask for credentials, verify them and map the configured network drives."""
    settings = get_settings()
    if gui is not None:
        settings = settings.model_copy(update={"prompt_mode": "gui" if gui else "console"})

    exit_code = 0
    with LogSession(settings, "map_drives"):
        try:
            service = get_drive_mapping_service(settings)
            outcome = asyncio.run(service.map_drives())
        except (ValueError, UnsupportedPlatformError, AuthenticationFailure) as e:
            logging.error(str(e))
            console.print(f"[bold red]{e}[/]")
            outcome = None
            exit_code = 1

        if outcome is not None and outcome.cancelled:
            console.print("[yellow]Cancelled - no drives were mapped.[/]")
        elif outcome is not None:
            console.print(_mapping_table(outcome.results))
            if not outcome.all_succeeded:
                exit_code = 2

    if exit_code:
        raise typer.Exit(code=exit_code)


@app.command("cleanup-profiles")
def cleanup_profiles(
    dry_run: bool = typer.Option(False, "--dry-run", help="Report what would be deleted"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
) -> None:
    """Delete profile folders of archived AD users across the configured UNC roots."""
    settings = get_settings()

    exit_code = 0
    results: Optional[List[CleanupResult]] = None
    with LogSession(settings, "cleanup_profiles"):
        try:
            service = get_profile_cleanup_service(settings)
            plan = service.plan()
            confirm = (lambda _message: True) if yes else (lambda message: typer.confirm(message, default=False))
            results = service.execute(plan, confirm=confirm, dry_run=dry_run)
        except OperationCancelled:
            console.print("[yellow]Cancelled - nothing was deleted.[/]")
        except (ValueError, DirectoryQueryError, SecretOperationError) as e:
            logging.error(str(e))
            console.print(f"[bold red]{e}[/]")
            exit_code = 1

        if results == []:
            console.print("No profile folders of archived users found.")
        elif results:
            console.print(_cleanup_table(results, dry_run))
            if not all(result.deleted for result in results):
                exit_code = 2

    if exit_code:
        raise typer.Exit(code=exit_code)


@vault_app.command("set")
def vault_set(
    name: str = typer.Argument(..., help="Vault entry name"),
    username: str = typer.Option(..., "--username", "-u", prompt=True),
    secret: str = typer.Option(..., "--secret", prompt=True, hide_input=True, confirmation_prompt=True),
) -> None:
    """Store a credential in the vault."""
    vault = get_credential_vault(get_settings())
    try:
        vault.set_credential(name, username, secret)
    except SecretOperationError as e:
        console.print(f"[bold red]{e}[/]")
        raise typer.Exit(code=1)
    console.print(f"[green]Stored credential '{name}'[/]")


@vault_app.command("get")
def vault_get(
    name: str = typer.Argument(..., help="Vault entry name"),
    show_secret: bool = typer.Option(False, "--show-secret", help="Print the secret as well"),
) -> None:
    """Show a stored credential."""
    vault = get_credential_vault(get_settings())
    try:
        credential = vault.get_credential(name)
    except SecretOperationError as e:
        console.print(f"[bold red]{e}[/]")
        raise typer.Exit(code=1)

    console.print(f"{name}: {credential.username}")
    if show_secret:
        console.print(credential.secret.get_secret_value(), markup=False)


@vault_app.command("delete")
def vault_delete(name: str = typer.Argument(..., help="Vault entry name")) -> None:
    """Remove a credential from the vault."""
    vault = get_credential_vault(get_settings())
    try:
        vault.delete_credential(name)
    except SecretOperationError as e:
        console.print(f"[bold red]{e}[/]")
        raise typer.Exit(code=1)
    console.print(f"[green]Deleted credential '{name}'[/]")


@app.command()
def encrypt(
    text: str = typer.Argument(..., help="Secret to encrypt"),
    subject: Optional[str] = typer.Option(None, "--subject", help="Certificate subject filter"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the CMS message to a file"),
) -> None:
    """Encrypt a secret as a CMS message for the document encryption certificate."""
    settings = get_settings()
    try:
        certificate = get_certificate_store(settings).find_encryption_certificate(
            subject or settings.certificate_subject
        )
        message = get_cms_cipher().encrypt(text, certificate)
    except SecretOperationError as e:
        console.print(f"[bold red]{e}[/]")
        raise typer.Exit(code=1)

    if output:
        output.write_text(message, encoding="ascii")
        console.print(f"[green]Encrypted message written to {output}[/]")
    else:
        console.print(message, markup=False, highlight=False)


@app.command()
def decrypt(
    message_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="CMS message file"),
    subject: Optional[str] = typer.Option(None, "--subject", help="Certificate subject filter"),
    key_password: Optional[str] = typer.Option(None, "--key-password", help="Private key password"),
) -> None:
    """Decrypt a CMS message with the configured certificate and private key."""
    settings = get_settings()
    cipher = get_cms_cipher()
    try:
        certificate = get_certificate_store(settings).find_encryption_certificate(
            subject or settings.certificate_subject
        )
        private_key = cipher.load_private_key(settings.private_key_path, key_password)
        plaintext = cipher.decrypt(message_file.read_text(encoding="ascii"), certificate, private_key)
    except SecretOperationError as e:
        console.print(f"[bold red]{e}[/]")
        raise typer.Exit(code=1)

    console.print(plaintext, markup=False, highlight=False)


@app.command("view-log")
def view_log(script: Optional[str] = typer.Argument(None, help="map_drives or cleanup_profiles")) -> None:
    """Open the newest log file in the configured log viewer."""
    viewer = get_log_viewer(get_settings())
    log_file = viewer.latest_log(script)
    if log_file is None:
        console.print("[yellow]No log files found.[/]")
        raise typer.Exit(code=1)

    try:
        viewer.launch(log_file)
    except OSError as e:
        console.print(f"[bold red]Could not open {log_file}: {e}[/]")
        raise typer.Exit(code=1)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
