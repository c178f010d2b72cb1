"""Releasing data volumes that a restarted instance no longer uses."""

from __future__ import annotations

from harvcore.datavolume import unset_bounded_data_volume_reference
from harvcore.objects import (
    VIRTUAL_MACHINE_API_VERSION,
    VIRTUAL_MACHINE_KIND,
    NotFoundError,
    VirtualMachineInstance,
    get_controller_of,
)
from harvcore.vm_controller import get_data_volume_names


class VMIController:
    """Handlers that erase a VM from the owners of data volumes it dropped."""

    def __init__(self, virtual_machine_cache, data_volume_client, data_volume_cache) -> None:
        self.virtual_machine_cache = virtual_machine_cache
        self.data_volume_client = data_volume_client
        self.data_volume_cache = data_volume_cache

    def unset_owner_of_data_volumes(self, key: str, vmi: VirtualMachineInstance | None):
        """Erase the parent VM from the owners of data volumes it no longer declares.

        When a VM's spec drops some data volumes and its instance is recreated,
        those volumes are no longer used, so the owned-by record is removed
        once the old instance is deleted.
        """
        if vmi is None or vmi.deletion_timestamp is None:
            return vmi

        vm_referred = get_controller_of(vmi)
        if vm_referred is None:
            return vmi
        if (
            vm_referred.api_version != VIRTUAL_MACHINE_API_VERSION
            or vm_referred.kind != VIRTUAL_MACHINE_KIND
        ):
            return vmi

        try:
            vm = self.virtual_machine_cache.get(vmi.namespace, vm_referred.name)
        except NotFoundError:
            # The VM is gone and its instance is being removed in the background.
            return vmi
        if vm.deletion_timestamp is not None:
            # The VM controller takes care of a deleted VM.
            return vmi

        desired: set[str] = set()
        if vm.spec.template is not None:
            desired = get_data_volume_names(vm.spec.template.spec)
        observed = get_data_volume_names(vmi.spec)

        for name in sorted(observed - desired):
            try:
                dv = self.data_volume_cache.get(vmi.namespace, name)
            except NotFoundError:
                continue
            unset_bounded_data_volume_reference(self.data_volume_client, dv, vm)

        return vmi