"""Configuration management."""

from .credential_store import CredentialStore
from .local_config import LocalConfig

__all__ = ["CredentialStore", "LocalConfig"]
