"""Per-machine SSH key pair stored in the machine folder"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from rich.console import Console

CONSOLE: Console = Console(stderr=True)

PRIVATE_KEY_NAME = "id_rsa"
PUBLIC_KEY_NAME = "id_rsa.pub"


@dataclass
class KeyPair:
    private_key_path: Path
    public_key_path: Path
    public_key: str


def key_dir(machine_folder: os.PathLike | str) -> Path:
    return Path(machine_folder) / ".ssh"


def private_key_path(machine_folder: os.PathLike | str) -> Path:
    return key_dir(machine_folder) / PRIVATE_KEY_NAME


def _public_openssh(private_key) -> bytes:
    return private_key.public_key().public_bytes(
        encoding=serialization.Encoding.OpenSSH,
        format=serialization.PublicFormat.OpenSSH,
    )


def _write_public_key(public_path: Path, public_key: bytes) -> None:
    public_path.write_bytes(public_key + b"\n")
    os.chmod(public_path, 0o644)


def ensure_key_pair(machine_folder: os.PathLike | str) -> KeyPair:
    """Generate the machine's RSA key pair unless it already exists.

    A missing public half is derived again from the existing private key.
    """
    ssh_dir = key_dir(machine_folder)
    ssh_dir.mkdir(mode=0o755, parents=True, exist_ok=True)

    private_path: Path = ssh_dir / PRIVATE_KEY_NAME
    public_path: Path = ssh_dir / PUBLIC_KEY_NAME

    if private_path.exists():
        CONSOLE.print("[dim]Using existing SSH key pair[/dim]")
        if not public_path.exists():
            CONSOLE.print("[yellow]Public key missing, deriving it from the private key...[/yellow]")
            private_key = serialization.load_ssh_private_key(private_path.read_bytes(), password=None)
            _write_public_key(public_path, _public_openssh(private_key))
        return KeyPair(private_path, public_path, public_path.read_text())

    CONSOLE.print("[yellow]Generating new SSH key pair...[/yellow]")
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)

    private_bytes = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.OpenSSH,
        encryption_algorithm=serialization.NoEncryption(),
    )
    # mode 0600 from creation, not after the write
    fd = os.open(private_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "wb") as f:
        f.write(private_bytes)
    os.chmod(private_path, 0o600)

    _write_public_key(public_path, _public_openssh(private_key))

    return KeyPair(private_path, public_path, public_path.read_text())
