"""DevPod machine provider for Oracle Cloud Infrastructure"""

from devpod_provider_oci.errors import (
    BackendError,
    ImageNotFound,
    InstanceNotFound,
    InvalidDiskSize,
    InvalidInputError,
    InvalidKeyFormat,
    MissingMachineID,
    NoNetworkInterface,
    OracleProviderError,
    ResourceNotFoundError,
    is_not_found,
)
from devpod_provider_oci.fingerprint import fingerprint
from devpod_provider_oci.provider import OracleProvider

__version__ = "0.1.0"

__all__ = [
    "BackendError",
    "ImageNotFound",
    "InstanceNotFound",
    "InvalidDiskSize",
    "InvalidInputError",
    "InvalidKeyFormat",
    "MissingMachineID",
    "NoNetworkInterface",
    "OracleProvider",
    "OracleProviderError",
    "ResourceNotFoundError",
    "fingerprint",
    "is_not_found",
]
