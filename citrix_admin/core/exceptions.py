# citrix_admin/core/exceptions.py

class InvalidTransitionError(Exception):
    """Raised when an authentication state transition is not allowed."""
    def __init__(self, from_state: str, to_state: str):
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Invalid authentication state transition: "
            f"Cannot move from '{from_state}' to '{to_state}'."
        )


class AuthenticationFailure(Exception):
    """Raised when every allowed credential attempt has been rejected."""
    def __init__(self, attempts: int, last_code: int, last_message: str = ""):
        self.attempts = attempts
        self.last_code = last_code
        self.last_message = last_message
        super().__init__(
            f"Authentication failed after {attempts} attempt(s) "
            f"(last error {last_code}: {last_message})"
        )


class BindFailure(Exception):
    """A single drive letter could not be bound to its remote path."""
    def __init__(self, alias: str, remote_path: str, code: int, message: str = ""):
        self.alias = alias
        self.remote_path = remote_path
        self.code = code
        super().__init__(f"Could not map {alias}: to {remote_path} (error {code}): {message}")


class OperationCancelled(Exception):
    """User-initiated stop. Terminal, but not an error."""
    pass


class UnsupportedPlatformError(Exception):
    """Raised when platform is not supported for drive mapping."""
    pass


class SecretOperationError(Exception):
    """Credential vault, certificate or CMS operation failed."""
    pass


class DirectoryQueryError(Exception):
    """Active Directory lookup failed."""
    pass
