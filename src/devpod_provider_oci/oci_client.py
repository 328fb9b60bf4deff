"""OCI service clients for one profile"""

from __future__ import annotations

from typing import Any

import oci

from devpod_provider_oci.auth_manager import OCIAuthManager
from devpod_provider_oci.errors import BackendError


class OCIClient:
    """Compute, virtual network and identity clients sharing one config.

    Transient transport failures are retried by the SDK's default retry
    strategy; nothing above this layer retries.
    """

    def __init__(self, auth_manager: OCIAuthManager, region: str | None = None) -> None:
        self.auth_manager: OCIAuthManager = auth_manager

        self.config: dict[str, Any] = dict(auth_manager.get_config())
        if region:
            self.config["region"] = region

        kwargs: dict[str, Any] = {"retry_strategy": oci.retry.DEFAULT_RETRY_STRATEGY}
        signer = auth_manager.get_signer(self.config)
        if signer is not None:
            kwargs["signer"] = signer

        self.compute_client: oci.core.ComputeClient = oci.core.ComputeClient(self.config, **kwargs)
        self.network_client: oci.core.VirtualNetworkClient = oci.core.VirtualNetworkClient(self.config, **kwargs)
        self.identity_client: oci.identity.IdentityClient = oci.identity.IdentityClient(self.config, **kwargs)

    @property
    def region(self) -> str:
        return self.config.get("region", "")

    def test_connectivity(self) -> bool:
        """Test OCI connectivity"""
        try:
            self.identity_client.list_regions()
        except Exception as e:
            raise BackendError("OCI connectivity test", e) from e
        return True
