"""Credential vault - Windows Credential Manager (or the platform keyring) via keyring."""

import json
import logging

import keyring
from keyring.errors import KeyringError, PasswordDeleteError
from pydantic import SecretStr

from ...core.exceptions import SecretOperationError
from ...models import Credential


class CredentialVault:
    """
    Stores named credentials under one service name.

    Each entry keeps user name and secret together as a small JSON document,
    so a single lookup returns a complete Credential.
    """

    def __init__(self, service_name: str = "citrix-admin"):
        self._service = service_name

    def set_credential(self, name: str, username: str, secret: str) -> None:
        payload = json.dumps({"username": username, "secret": secret})
        try:
            keyring.set_password(self._service, name, payload)
        except KeyringError as e:
            raise SecretOperationError(f"Could not store credential '{name}': {e}") from e
        logging.info(f"Stored credential '{name}' for {username} in {keyring.get_keyring().name}")

    def get_credential(self, name: str) -> Credential:
        try:
            payload = keyring.get_password(self._service, name)
        except KeyringError as e:
            raise SecretOperationError(f"Could not read credential '{name}': {e}") from e

        if payload is None:
            raise SecretOperationError(f"No credential named '{name}' in vault '{self._service}'")

        try:
            data = json.loads(payload)
            return Credential(username=data["username"], secret=SecretStr(data["secret"]))
        except (ValueError, KeyError, TypeError) as e:
            raise SecretOperationError(f"Vault entry '{name}' is not a credential entry") from e

    def has_credential(self, name: str) -> bool:
        try:
            return keyring.get_password(self._service, name) is not None
        except KeyringError as e:
            logging.warning(f"Vault lookup for '{name}' failed: {e}")
            return False

    def delete_credential(self, name: str) -> None:
        try:
            keyring.delete_password(self._service, name)
        except PasswordDeleteError as e:
            raise SecretOperationError(f"No credential named '{name}' to delete") from e
        except KeyringError as e:
            raise SecretOperationError(f"Could not delete credential '{name}': {e}") from e
        logging.info(f"Deleted credential '{name}'")
