"""SSH public key fingerprints in OpenSSH's SHA256 format"""

from __future__ import annotations

import base64
import binascii
import hashlib
import re

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives.serialization import load_ssh_public_key

from devpod_provider_oci.errors import InvalidKeyFormat

_KEY_TYPE_RE = re.compile(r"^(ssh-[a-z0-9-]+|ecdsa-sha2-[a-z0-9-]+|sk-[a-z0-9@.-]+)(@openssh\.com)?$")


def _split_authorized_key(public_key: str) -> tuple[str, str]:
    """Return ``(key_type, base64_blob)`` from the first key line.

    Leading options and the trailing comment of an authorized_keys line are skipped.
    """
    for line in public_key.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        fields = line.split()
        for index, field in enumerate(fields[:-1]):
            if _KEY_TYPE_RE.match(field):
                return field, fields[index + 1]

    raise InvalidKeyFormat("ssh: no key found")


def fingerprint(public_key: str) -> str:
    """Compute ``SHA256:<digest>`` for an authorized-key formatted public key.

    The digest is taken over the key's wire blob and base64 encoded without
    padding, the same value ``ssh-keygen -lf`` prints.

    Raises:
        InvalidKeyFormat: If no parseable key is present.
    """
    key_type, encoded = _split_authorized_key(public_key)

    try:
        blob = base64.b64decode(encoded, validate=True)
        load_ssh_public_key(f"{key_type} {encoded}".encode())
    except (binascii.Error, ValueError, UnsupportedAlgorithm) as e:
        raise InvalidKeyFormat(f"ssh: invalid {key_type} key: {e}") from e

    digest = base64.b64encode(hashlib.sha256(blob).digest()).decode("ascii")
    return "SHA256:" + digest.rstrip("=")
