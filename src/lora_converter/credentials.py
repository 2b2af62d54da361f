"""Registry API key resolution from environment, dotenv file and keyring.

Sources are tried in order and the first non-empty value wins:

1. ``CIVITAI_API_KEY`` environment variable
2. ``CIVITAI_API_KEY=...`` line in ``~/.env``
3. Platform keyring entry (service ``civitai``, account ``api-key``)

A missing source is a normal outcome, never an error. When nothing is found
the registry is queried unauthenticated.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Sequence
from pathlib import Path

import keyring
from keyring.errors import KeyringError

from .config import API_KEY_ENV_VAR, KEYRING_ACCOUNT, KEYRING_SERVICE, get_dotenv_path

logger = logging.getLogger(__name__)

CredentialSource = Callable[[], str | None]


def from_environment(var_name: str = API_KEY_ENV_VAR) -> str | None:
    return os.environ.get(var_name)


def parse_dotenv_value(text: str, key: str = API_KEY_ENV_VAR) -> str | None:
    """Find ``key`` in ``KEY=value`` lines.

    Each line is split on the first ``=`` only, so values may contain ``=``.
    Key and value are trimmed. Lines with an empty value are skipped; the
    first remaining match decides.
    """
    for line in text.splitlines():
        name, sep, value = line.partition("=")
        value = value.strip()
        if sep and value and name.strip() == key:
            return value
    return None


def from_dotenv(path: Path | None = None, key: str = API_KEY_ENV_VAR) -> str | None:
    path = path or get_dotenv_path()
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError) as e:
        logger.debug(f"Could not read {path}: {e}")
        return None
    return parse_dotenv_value(text, key)


def from_keyring(service: str = KEYRING_SERVICE, account: str = KEYRING_ACCOUNT) -> str | None:
    try:
        return keyring.get_password(service, account)
    except KeyringError as e:
        # No usable backend on this platform
        logger.debug(f"Keyring lookup unavailable: {e}")
        return None


def default_sources() -> tuple[CredentialSource, ...]:
    return (from_environment, from_dotenv, from_keyring)


class CredentialResolver:
    """Resolve the registry API key from an ordered sequence of sources."""

    def __init__(self, sources: Sequence[CredentialSource] | None = None) -> None:
        self._sources = tuple(sources) if sources is not None else default_sources()

    @property
    def sources(self) -> tuple[CredentialSource, ...]:
        return self._sources

    def resolve_with_source(self) -> tuple[str, str] | tuple[None, None]:
        """Return the credential and the name of the source that supplied it."""
        for source in self._sources:
            value = source()
            if value:
                name = getattr(source, "__name__", repr(source))
                logger.debug(f"Registry credential found via {name}")
                return value, name
        return None, None

    def resolve(self) -> str | None:
        value, _ = self.resolve_with_source()
        return value
