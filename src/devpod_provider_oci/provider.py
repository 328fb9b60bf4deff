"""DevPod machine provider backed by OCI compute"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator

from oci.core.models import Instance
from rich.console import Console

from devpod_provider_oci.auth_manager import OCIAuthManager
from devpod_provider_oci.errors import BackendError, OracleProviderError
from devpod_provider_oci.instance_builder import InstanceRequestBuilder
from devpod_provider_oci.lifecycle import InstanceLifecycleManager
from devpod_provider_oci.locator import ResourceLocator
from devpod_provider_oci.network import NetworkConvergence
from devpod_provider_oci.oci_client import OCIClient
from devpod_provider_oci.options import Options

CONSOLE: Console = Console(stderr=True)


@contextmanager
def operation(name: str) -> Iterator[None]:
    """Label any non-provider exception raised inside with ``name``"""
    try:
        yield
    except OracleProviderError:
        raise
    except Exception as e:
        raise BackendError(name, e) from e


class OracleProvider:
    """Create, inspect and remove the instance of a DevPod machine.

    ``client`` only needs ``compute_client`` and ``network_client``
    attributes, usually an :class:`OCIClient`.
    """

    def __init__(self, client: Any, compartment_id: str) -> None:
        self.client: Any = client
        self.compartment_id: str = compartment_id

        self.locator: ResourceLocator = ResourceLocator(client.compute_client, client.network_client)
        self.network: NetworkConvergence = NetworkConvergence(self.locator)
        self.builder: InstanceRequestBuilder = InstanceRequestBuilder(self.locator, self.network)
        self.lifecycle: InstanceLifecycleManager = InstanceLifecycleManager(self.locator, compartment_id)

    @classmethod
    def from_options(cls, options: Options) -> OracleProvider:
        auth_manager = OCIAuthManager(options.oci_config_file, options.oci_profile)
        client = OCIClient(auth_manager, region=options.region or None)
        return cls(client, options.compartment_id)

    def create(
        self,
        machine_id: str,
        disk_image: str,
        disk_size_gb: str,
        shape: str,
        region: str,
        availability_domain: str,
        public_key: str,
    ) -> Instance:
        with operation("build instance options"):
            details = self.builder.build(
                machine_id,
                disk_image,
                disk_size_gb,
                shape,
                region,
                availability_domain,
                self.compartment_id,
                public_key,
            )

        with operation("launch instance"):
            instance = self.client.compute_client.launch_instance(details).data

        CONSOLE.print(f"[green]✅ Launched instance {instance.display_name} ({instance.id})[/green]")
        return instance

    def get(self, machine_id: str) -> Instance:
        with operation("get instance"):
            return self.lifecycle.get(machine_id)

    def delete(self, machine_id: str) -> None:
        with operation("delete instance"):
            self.lifecycle.delete(machine_id)

    def start(self, machine_id: str) -> None:
        with operation("start instance"):
            self.lifecycle.start(machine_id)

    def stop(self, machine_id: str) -> None:
        with operation("stop instance"):
            self.lifecycle.stop(machine_id)

    def status(self, machine_id: str) -> str:
        with operation("get instance status"):
            return self.lifecycle.status(machine_id)

    def ip(self, machine_id: str) -> str:
        with operation("get instance IP"):
            return self.lifecycle.ip(machine_id)
