"""Credential prompts - console (Rich) and GUI (tkinter) front ends."""

import logging
import signal
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterator, Optional

from pydantic import SecretStr
from rich.console import Console
from rich.prompt import Prompt

from ...models import Credential


@contextmanager
def interruptible_prompt() -> Iterator[None]:
    """
    Let Ctrl+C raise KeyboardInterrupt while a blocking prompt waits.

    asyncio.run() replaces the SIGINT handler with one that only cancels the
    main task, which a prompt blocked in input() never notices.
    """
    if threading.current_thread() is not threading.main_thread():
        yield
        return

    previous = signal.getsignal(signal.SIGINT)
    signal.signal(signal.SIGINT, signal.default_int_handler)
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous)


class CredentialPrompt(ABC):
    """Interaction boundary for the credential loop. collect() returns None on cancel."""

    @abstractmethod
    def collect(self) -> Optional[Credential]:
        pass

    @abstractmethod
    def show_error(self, message: str) -> None:
        pass


class ConsoleCredentialPrompt(CredentialPrompt):
    """Asks on the terminal. Ctrl+C, EOF or ':q' as user name cancels."""

    CANCEL_WORD = ":q"

    def __init__(self, console: Optional[Console] = None, default_username: str = ""):
        self._console = console or Console()
        self._default_username = default_username

    def collect(self) -> Optional[Credential]:
        logging.info("Prompting for credentials (console)")
        extra = {"default": self._default_username} if self._default_username else {}
        try:
            with interruptible_prompt():
                username = Prompt.ask(
                    f"Username [dim]({self.CANCEL_WORD} to cancel)[/]",
                    console=self._console,
                    **extra,
                )
                if username.strip() == self.CANCEL_WORD:
                    return None
                secret = Prompt.ask("Password", console=self._console, password=True)
        except (KeyboardInterrupt, EOFError):
            self._console.print()
            return None

        return Credential(username=username.strip(), secret=SecretStr(secret or ""))

    def show_error(self, message: str) -> None:
        self._console.print(f"[bold red]{message}[/]")


class TkCredentialPrompt(CredentialPrompt):
    """Modal login dialog. Closing the window or pressing Cancel cancels."""

    def __init__(self, title: str = "Map network drives", default_username: str = ""):
        self._title = title
        self._default_username = default_username

    def collect(self) -> Optional[Credential]:
        import tkinter as tk
        from tkinter import simpledialog

        logging.info("Prompting for credentials (dialog)")
        root = tk.Tk()
        root.withdraw()
        default_username = self._default_username

        class _LoginDialog(simpledialog.Dialog):
            def body(self, master):
                tk.Label(master, text="Username:").grid(row=0, sticky="w")
                tk.Label(master, text="Password:").grid(row=1, sticky="w")
                self.username_entry = tk.Entry(master, width=32)
                self.username_entry.insert(0, default_username)
                self.secret_entry = tk.Entry(master, width=32, show="*")
                self.username_entry.grid(row=0, column=1)
                self.secret_entry.grid(row=1, column=1)
                return self.secret_entry if default_username else self.username_entry

            def apply(self):
                self.result = (self.username_entry.get(), self.secret_entry.get())

        try:
            dialog = _LoginDialog(root, title=self._title)
            result = dialog.result
        finally:
            root.destroy()

        if result is None:
            return None
        username, secret = result
        return Credential(username=username.strip(), secret=SecretStr(secret))

    def show_error(self, message: str) -> None:
        import tkinter as tk
        from tkinter import messagebox

        root = tk.Tk()
        root.withdraw()
        try:
            messagebox.showerror(self._title, message, parent=root)
        finally:
            root.destroy()
