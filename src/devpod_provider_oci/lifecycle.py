"""Look up, start, stop, terminate and inspect DevPod instances"""

from __future__ import annotations

import oci
from oci.core.models import Instance
from rich.console import Console

from devpod_provider_oci.constants import (
    LABEL_MACHINE_ID,
    STATUS_NOT_FOUND,
    STATUS_RUNNING,
    STATUS_STARTING,
    STATUS_STOPPED,
    STATUS_STOPPING,
    STATUS_TERMINATED,
    display_name,
)
from devpod_provider_oci.errors import (
    InstanceNotFound,
    MissingMachineID,
    NoNetworkInterface,
    is_not_found,
)
from devpod_provider_oci.locator import ResourceKind, ResourceLocator

CONSOLE: Console = Console(stderr=True)

STATUS_BY_LIFECYCLE_STATE: dict[str, str] = {
    Instance.LIFECYCLE_STATE_RUNNING: STATUS_RUNNING,
    Instance.LIFECYCLE_STATE_STOPPED: STATUS_STOPPED,
    Instance.LIFECYCLE_STATE_TERMINATED: STATUS_TERMINATED,
    Instance.LIFECYCLE_STATE_PROVISIONING: STATUS_STARTING,
    Instance.LIFECYCLE_STATE_STARTING: STATUS_STARTING,
    Instance.LIFECYCLE_STATE_STOPPING: STATUS_STOPPING,
}

_GONE_STATES: frozenset[str] = frozenset(
    {Instance.LIFECYCLE_STATE_TERMINATING, Instance.LIFECYCLE_STATE_TERMINATED}
)

ACTION_START = "START"
ACTION_STOP = "STOP"


def map_lifecycle_state(lifecycle_state: str) -> str:
    """Status token for an OCI lifecycle state; unknown states pass through"""
    return STATUS_BY_LIFECYCLE_STATE.get(lifecycle_state, lifecycle_state)


class InstanceLifecycleManager:
    """Instance operations keyed on the ``machine-id`` freeform tag.

    start and stop return as soon as OCI accepts the action. Callers that
    need the settled state poll :meth:`status`.
    """

    def __init__(self, locator: ResourceLocator, compartment_id: str) -> None:
        self.locator: ResourceLocator = locator
        self.compute_client: oci.core.ComputeClient = locator.compute_client
        self.network_client: oci.core.VirtualNetworkClient = locator.network_client
        self.compartment_id: str = compartment_id

    def get(self, machine_id: str) -> Instance:
        """The machine's instance, preferring one that is not TERMINATED.

        Terminated instances stay listed for a while after deletion, so a
        recreated machine can have both. The terminated record is returned
        only when it is the sole match.
        """
        if not machine_id:
            raise MissingMachineID()

        matches = self.locator.find_all(
            ResourceKind.INSTANCE,
            self.compartment_id,
            display_name(machine_id),
            tags={LABEL_MACHINE_ID: machine_id},
        )
        if not matches:
            raise InstanceNotFound()

        for instance in matches:
            if instance.lifecycle_state != Instance.LIFECYCLE_STATE_TERMINATED:
                return instance
        return matches[0]

    def delete(self, machine_id: str) -> None:
        try:
            instance = self.get(machine_id)
        except Exception as e:
            if is_not_found(e):
                CONSOLE.print(f"[dim]No instance for machine {machine_id}, nothing to delete[/dim]")
                return
            raise

        if instance.lifecycle_state in _GONE_STATES:
            return

        try:
            self.compute_client.terminate_instance(instance.id, preserve_boot_volume=False)
        except Exception as e:
            if not is_not_found(e):
                raise
        CONSOLE.print(f"[green]✅ Terminating instance {instance.display_name}[/green]")

    def start(self, machine_id: str) -> None:
        self._transition(machine_id, Instance.LIFECYCLE_STATE_RUNNING, ACTION_START)

    def stop(self, machine_id: str) -> None:
        self._transition(machine_id, Instance.LIFECYCLE_STATE_STOPPED, ACTION_STOP)

    def _transition(self, machine_id: str, target_state: str, action: str) -> None:
        instance = self.get(machine_id)
        if instance.lifecycle_state == target_state:
            return

        self.compute_client.instance_action(instance.id, action)
        CONSOLE.print(f"[green]✅ {action} accepted for instance {instance.display_name}[/green]")

    def status(self, machine_id: str) -> str:
        try:
            instance = self.get(machine_id)
        except Exception as e:
            if is_not_found(e):
                return STATUS_NOT_FOUND
            raise
        return map_lifecycle_state(instance.lifecycle_state)

    def ip(self, machine_id: str) -> str:
        """Public IP of the primary VNIC, or its private IP when none is assigned"""
        instance = self.get(machine_id)

        attachments = oci.pagination.list_call_get_all_results(
            self.compute_client.list_vnic_attachments,
            compartment_id=self.compartment_id,
            instance_id=instance.id,
        ).data
        if not attachments:
            raise NoNetworkInterface(instance.id)

        vnic = self.network_client.get_vnic(attachments[0].vnic_id).data
        return vnic.public_ip or vnic.private_ip
