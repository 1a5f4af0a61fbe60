"""API credentials and request signing.

Credentials can be built directly or loaded with ``load_credentials``.

Priority order for ``load_credentials``:
1. Environment variables: CB_ACCESS_KEY, CB_ACCESS_PASSPHRASE, CB_SIGNING_KEY
2. Config file: ~/.coinbase_config.json or custom path via ENV CB_CONFIG_PATH
"""
import base64
import binascii
import hashlib
import hmac
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .errors import CoinbaseClientError


@dataclass(frozen=True)
class Credentials:
    """Access key, passphrase and signing key for one API profile.

    ``signing_key`` may be the base64 secret issued by Coinbase or a plain
    text secret; both are accepted by ``sign``.
    """
    access_key: str
    passphrase: str = field(repr=False)
    signing_key: str = field(repr=False)

    def __post_init__(self):
        for name in ("access_key", "passphrase", "signing_key"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise CoinbaseClientError(f"{name.replace('_', ' ').capitalize()} is required")

    def _hmac_key(self) -> bytes:
        try:
            return base64.b64decode(self.signing_key, validate=True)
        except (binascii.Error, ValueError):
            return self.signing_key.encode("utf-8")

    def sign(self, timestamp: str, method: str, path: str, body: str) -> str:
        """Return the base64 HMAC-SHA256 of ``timestamp + method + path + body``."""
        try:
            message = f"{timestamp}{method}{path}{body}"
            digest = hmac.new(self._hmac_key(), message.encode("utf-8"), hashlib.sha256).digest()
            signature = base64.b64encode(digest).decode("ascii")
        except Exception as e:
            raise CoinbaseClientError("Failed to generate signature") from e
        return signature


def load_credentials(config_path: Optional[str] = None) -> Credentials:
    """Load Coinbase credentials from env or config file.

    Args:
        config_path: Optional override path to config file. If not provided,
                     checks CB_CONFIG_PATH env var, then ~/.coinbase_config.json

    Returns:
        Credentials with access_key, passphrase, signing_key

    Raises:
        ValueError: If credentials are not found or incomplete
    """
    access_key = os.getenv("CB_ACCESS_KEY")
    passphrase = os.getenv("CB_ACCESS_PASSPHRASE")
    signing_key = os.getenv("CB_SIGNING_KEY")

    if access_key and passphrase and signing_key:
        return Credentials(access_key=access_key, passphrase=passphrase, signing_key=signing_key)

    if config_path is None:
        config_path = os.getenv("CB_CONFIG_PATH")
    if config_path is None:
        config_path = str(Path.home() / ".coinbase_config.json")

    config_file = Path(config_path)
    if config_file.exists():
        try:
            with config_file.open("r") as f:
                cfg = json.load(f)
        except (OSError, ValueError) as e:
            raise ValueError(f"Failed to load config from {config_path}: {e}") from e
        access_key = access_key or cfg.get("access_key")
        passphrase = passphrase or cfg.get("passphrase")
        signing_key = signing_key or cfg.get("signing_key")

    if not access_key or not passphrase or not signing_key:
        raise ValueError(
            "Missing Coinbase credentials. Provide via:\n"
            "  - Environment: CB_ACCESS_KEY, CB_ACCESS_PASSPHRASE, CB_SIGNING_KEY\n"
            f"  - Config file: {config_path}\n"
            "  - CB_CONFIG_PATH env var to override config location"
        )

    return Credentials(access_key=access_key, passphrase=passphrase, signing_key=signing_key)


def save_config(
    config_path: str,
    access_key: str,
    passphrase: str,
    signing_key: str,
) -> None:
    """Save credentials to a config file for later use.

    WARNING: Stores secrets in plaintext. The file is restricted to the owner
    where the platform supports it.
    """
    config = {
        "access_key": access_key,
        "passphrase": passphrase,
        "signing_key": signing_key,
    }
    cfg_file = Path(config_path)
    cfg_file.parent.mkdir(parents=True, exist_ok=True)

    with cfg_file.open("w") as f:
        json.dump(config, f, indent=2)

    try:
        cfg_file.chmod(0o600)
    except OSError:
        pass  # chmod unsupported; skip silently
