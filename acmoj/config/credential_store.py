"""Credential storage (base URL, username, password and session token)."""

import base64
import binascii
import json
import logging
import os
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

import click

from ..errors import StorageError


logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://acm.sjtu.edu.cn/OnlineJudge/"

BASE_URL = "baseUrl"
USERNAME = "username"
PASSWORD = "password"
SESSION_TOKEN = "sessionToken"

KEYS = (BASE_URL, USERNAME, PASSWORD, SESSION_TOKEN)


def default_config_path() -> Path:
    """Location of the credential file when none is given."""
    return Path(click.get_app_dir("acmoj")) / "config.json"


def encode_password(password: str) -> str:
    """Encode a password for storage. This is base64, not encryption."""
    return base64.b64encode(password.encode("utf-8")).decode("ascii")


def decode_password(encoded: str) -> str:
    """Reverse encode_password."""
    return base64.b64decode(encoded.encode("ascii")).decode("utf-8")


class CredentialStore:
    """
    Persistent key/value record of the user's judge credentials.
    Every change is written to disk immediately; the file is only
    readable by its owner.
    """

    def __init__(self, path: Path, data: Optional[dict] = None):
        self.path = path
        self._data = dict(data or {})

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "CredentialStore":
        """Load the store from file. A missing file gives an empty store."""
        if path is None:
            path = default_config_path()

        if not path.exists():
            logger.debug("no credential file at %s", path)
            return cls(path)

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise cls._broken(path) from e
        except OSError as e:
            raise StorageError(f"cannot read configuration file {path}: {e}") from e

        if not isinstance(data, dict):
            raise cls._broken(path)
        data = {k: v for k, v in data.items() if k in KEYS}
        if not all(isinstance(v, str) for v in data.values()):
            raise cls._broken(path)

        store = cls(path, data)
        if not _is_usable_base_url(store.get(BASE_URL)):
            raise cls._broken(path)
        if PASSWORD in data:
            try:
                decode_password(data[PASSWORD])
            except (binascii.Error, UnicodeError) as e:
                raise cls._broken(path) from e
        return store

    @staticmethod
    def _broken(path: Path) -> StorageError:
        return StorageError(
            "it seems you have a broken configuration file. "
            f"try removing this file: {path}"
        )

    def has(self, key: str) -> bool:
        _check_key(key)
        return key in self._data

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        _check_key(key)
        if key == BASE_URL:
            default = default or DEFAULT_BASE_URL
        return self._data.get(key, default)

    def set(self, key: str, value: str) -> None:
        _check_key(key)
        self._data[key] = value
        self.save()

    def delete(self, key: str) -> None:
        _check_key(key)
        if self._data.pop(key, None) is not None:
            self.save()

    def save(self) -> None:
        """Write the store to disk with owner-only permissions."""
        try:
            self.path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
            fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(self._data, f, indent=2)
            os.chmod(self.path, 0o600)
        except OSError as e:
            raise StorageError(f"cannot write configuration file {self.path}: {e}") from e
        logger.debug("saved credential file %s", self.path)

    @property
    def base_url(self) -> str:
        url = self.get(BASE_URL)
        return url if url.endswith("/") else url + "/"

    @property
    def username(self) -> Optional[str]:
        return self.get(USERNAME)

    @property
    def password(self) -> Optional[str]:
        """Decoded stored password, or None when not remembered."""
        encoded = self.get(PASSWORD)
        if not encoded:
            return None
        return decode_password(encoded)

    @property
    def session_token(self) -> Optional[str]:
        return self.get(SESSION_TOKEN)

    def has_credentials(self) -> bool:
        """Check if both username and password are stored."""
        return self.has(USERNAME) and self.has(PASSWORD)


def _check_key(key: str) -> None:
    if key not in KEYS:
        raise KeyError(key)


def _is_usable_base_url(url: str) -> bool:
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)
