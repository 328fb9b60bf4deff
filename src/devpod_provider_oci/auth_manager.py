"""OCI configuration loading for a named profile"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import oci

from devpod_provider_oci.errors import ConfigurationError

DEFAULT_CONFIG_FILE = "~/.oci/config"
DEFAULT_PROFILE = "DEFAULT"


class OCIAuthManager:
    """Resolves the OCI config and signer for one profile of one config file.

    Profiles written by ``oci session authenticate`` carry a
    ``security_token_file``; those are signed with the session token instead
    of the API key.
    """

    def __init__(self, config_file: os.PathLike | str, profile: str | None = DEFAULT_PROFILE):
        if not config_file:
            raise ConfigurationError("OCI config file path is required")

        self.config_file: Path = Path(config_file).expanduser()
        self.profile: str = profile or DEFAULT_PROFILE

    def get_config(self) -> dict[str, Any]:
        """Get OCI config dictionary for the profile"""
        if not self.config_file.exists():
            raise ConfigurationError(f"OCI config file not found: {self.config_file}")

        try:
            config: dict[str, Any] = oci.config.from_file(str(self.config_file), self.profile)
            if not self.uses_session_token(config):
                oci.config.validate_config(config)
        except oci.exceptions.ClientError as e:
            raise ConfigurationError(
                f"Invalid OCI profile {self.profile!r} in {self.config_file}: {e.__class__.__name__}: {e}"
            ) from e
        return config

    @staticmethod
    def uses_session_token(config: dict[str, Any]) -> bool:
        return bool(config.get("security_token_file"))

    def get_signer(self, config: dict[str, Any]) -> Any | None:
        """Session token signer, or ``None`` to let the SDK sign with the API key"""
        if not self.uses_session_token(config):
            return None

        token_file = Path(config["security_token_file"]).expanduser()
        key_file = config.get("key_file")
        if not token_file.exists():
            raise ConfigurationError(f"Security token file not found: {token_file}")
        if not key_file or not Path(key_file).expanduser().exists():
            raise ConfigurationError(f"Profile {self.profile!r} has a security token but no usable key_file")

        token = token_file.read_text(encoding="utf-8").strip()
        private_key = oci.signer.load_private_key_from_file(str(Path(key_file).expanduser()))
        return oci.auth.signers.SecurityTokenSigner(token, private_key)
