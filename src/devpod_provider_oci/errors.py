"""Exceptions raised by the provider and the not-found predicate"""

from __future__ import annotations

from oci.exceptions import ServiceError

from devpod_provider_oci.constants import ERR_MISSING_MACHINE_ID, ERR_MISSING_SERVER

_NOT_FOUND_MARKERS: tuple[str, ...] = ("not found", "NotFound", "does not exist")


class OracleProviderError(Exception):
    """Base class for every error raised by this package"""


class ResourceNotFoundError(OracleProviderError):
    """A looked-up resource does not exist"""


class InstanceNotFound(ResourceNotFoundError):
    def __init__(self, message: str = ERR_MISSING_SERVER) -> None:
        super().__init__(message)


class ImageNotFound(ResourceNotFoundError):
    def __init__(self, image_name: str) -> None:
        super().__init__(f"image {image_name} not found")
        self.image_name: str = image_name


class InvalidInputError(OracleProviderError):
    """Caller supplied a value that cannot be used"""


class InvalidKeyFormat(InvalidInputError):
    pass


class InvalidDiskSize(InvalidInputError):
    def __init__(self, value: str) -> None:
        super().__init__(f"failed to parse disk size: {value!r}")
        self.value: str = value


class MissingMachineID(InvalidInputError):
    def __init__(self) -> None:
        super().__init__(ERR_MISSING_MACHINE_ID)


class NoNetworkInterface(OracleProviderError):
    def __init__(self, instance_id: str) -> None:
        super().__init__(f"no VNIC attachments found for instance {instance_id}")
        self.instance_id: str = instance_id


class BackendError(OracleProviderError):
    """A failed OCI call, labelled with the operation that made it.

    Always raised ``from`` the original exception so the cause stays reachable.
    """

    def __init__(self, operation: str, cause: BaseException) -> None:
        super().__init__(f"{operation}: {cause}")
        self.operation: str = operation
        self.cause: BaseException = cause


class OptionsError(OracleProviderError):
    """Required option missing from the environment"""


class ConfigurationError(OracleProviderError):
    """OCI configuration file or profile cannot be used"""


def _cause_chain(err: BaseException):
    seen: set[int] = set()
    current: BaseException | None = err
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__


def is_not_found(err: BaseException | None) -> bool:
    """Whether ``err`` means "the resource is absent".

    A service error decides on its HTTP status alone. Anything else is judged
    by its message.
    """
    if err is None:
        return False

    for exc in _cause_chain(err):
        if isinstance(exc, ServiceError):
            return exc.status == 404
        if isinstance(exc, ResourceNotFoundError):
            return True

    message = str(err)
    return any(marker in message for marker in _NOT_FOUND_MARKERS)
