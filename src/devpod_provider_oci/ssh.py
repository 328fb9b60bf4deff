"""Run commands on a machine over ssh"""

from __future__ import annotations

import os
import subprocess
from pathlib import Path

from devpod_provider_oci.constants import SSH_USER
from devpod_provider_oci.errors import OracleProviderError


class SSHCommandRunner:
    """Run a single command on the instance with the machine's private key"""

    def __init__(self, private_key_path: os.PathLike | str, user: str = SSH_USER) -> None:
        self.private_key_path: Path = Path(os.path.normpath(private_key_path))
        self.user: str = user

    def build_args(self, host: str, command: str) -> list[str]:
        return [
            "ssh",
            "-o",
            "StrictHostKeyChecking=no",
            "-o",
            "UserKnownHostsFile=/dev/null",
            "-i",
            str(self.private_key_path),
            f"{self.user}@{host}",
            command,
        ]

    def run(self, host: str, command: str) -> int:
        """Run ``command`` with this process's stdio and return its exit code"""
        try:
            result: subprocess.CompletedProcess[bytes] = subprocess.run(self.build_args(host, command))
        except FileNotFoundError as e:
            raise OracleProviderError("ssh client not found. Please install it first.") from e
        return result.returncode
