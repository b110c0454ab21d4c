"""Active Directory lookup of archived (offboarded) user accounts."""

import logging
from typing import Callable, List

from ldap3 import ALL, NTLM, SUBTREE, Connection, Server
from ldap3.core.exceptions import LDAPException

from ...config import Settings
from ...core.exceptions import DirectoryQueryError
from ...models import ArchivedUser, Credential

ACCOUNTDISABLE = 0x0002


def create_ldap_connection(settings: Settings, credential: Credential) -> Connection:
    """NTLM bound connection to the configured domain controller."""
    server = Server(settings.ldap_server, use_ssl=settings.ldap_use_ssl, get_info=ALL, connect_timeout=10)
    return Connection(
        server,
        user=credential.qualified_username(settings.default_domain),
        password=credential.secret.get_secret_value(),
        authentication=NTLM,
        auto_bind=True,
        raise_exceptions=True,
    )


class ArchivedUserDirectory:
    """Finds user accounts below the archive OU. SRP: AD queries ONLY."""

    USER_FILTER = "(&(objectClass=user)(!(objectClass=computer)))"
    ATTRIBUTES = ["sAMAccountName", "userAccountControl"]

    def __init__(
        self,
        search_base: str,
        connection_factory: Callable[[], Connection],
        only_disabled: bool = True,
        page_size: int = 500,
    ):
        self._search_base = search_base
        self._connection_factory = connection_factory
        self._only_disabled = only_disabled
        self._page_size = page_size

    def find_archived_users(self) -> List[ArchivedUser]:
        """
        Raises:
            DirectoryQueryError: If the directory cannot be reached or searched.
        """
        if not self._search_base:
            raise DirectoryQueryError("No LDAP search base configured for archived users")

        logging.info(f"Searching archived users below {self._search_base}")
        try:
            connection = self._connection_factory()
            try:
                response = connection.extend.standard.paged_search(
                    search_base=self._search_base,
                    search_filter=self.USER_FILTER,
                    search_scope=SUBTREE,
                    attributes=self.ATTRIBUTES,
                    paged_size=self._page_size,
                    generator=False,
                )
                status = connection.result or {}
            finally:
                connection.unbind()
        except LDAPException as e:
            raise DirectoryQueryError(f"Active Directory query failed: {e}") from e

        # Without raise_exceptions a failed search (bad base, no rights) just comes back empty
        if status.get("result", 0) != 0:
            raise DirectoryQueryError(
                f"Active Directory search below {self._search_base} failed: "
                f"{status.get('description')} ({status.get('message') or status.get('result')})"
            )

        users = [self._to_user(item) for item in response if item.get("type") == "searchResEntry"]
        users = [user for user in users if user.sam_account_name]
        if self._only_disabled:
            users = [user for user in users if user.disabled]

        logging.info(f"Found {len(users)} archived user(s)")
        return users

    @staticmethod
    def _to_user(item: dict) -> ArchivedUser:
        attributes = item.get("attributes", {})
        sam = attributes.get("sAMAccountName") or ""
        if isinstance(sam, list):
            sam = sam[0] if sam else ""

        raw_control = attributes.get("userAccountControl") or 0
        if isinstance(raw_control, list):
            raw_control = raw_control[0] if raw_control else 0
        try:
            control = int(raw_control)
        except (TypeError, ValueError):
            logging.warning(f"Unreadable userAccountControl for {item.get('dn')}: {raw_control!r}")
            control = 0

        return ArchivedUser(
            sam_account_name=str(sam),
            distinguished_name=item.get("dn", ""),
            disabled=bool(control & ACCOUNTDISABLE),
        )
