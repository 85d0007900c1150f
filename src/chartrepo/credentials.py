"""Password resolution for repositories that require basic auth."""

from typing import Callable, Optional

import click

from .errors import CredentialPromptError

# Returns a secret read from the user.
PasswordReader = Callable[[], str]


def read_password() -> str:
    """Read a password from the terminal without echoing it."""
    return str(click.prompt("Password", hide_input=True, default="", show_default=False, err=True))


def resolve_password(
    username: Optional[str],
    password: Optional[str],
    reader: Optional[PasswordReader] = None,
) -> Optional[str]:
    """Return the password to use for ``username``.

    The reader is only called when a username is given without a password.

    Raises:
        CredentialPromptError: If the reader fails or is interrupted
    """
    if not username or password:
        return password

    reader = reader or read_password
    try:
        return reader()
    except (click.Abort, EOFError, KeyboardInterrupt, OSError) as e:
        raise CredentialPromptError(f"failed to read password for user {username!r}: {str(e) or 'aborted'}", username) from e
