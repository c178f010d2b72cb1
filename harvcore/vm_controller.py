"""Keeping the owned-by records of data volumes in step with virtual machines."""

from __future__ import annotations

from harvcore.datavolume import (
    set_ownerless_data_volume_reference,
    unset_bounded_data_volume_reference,
)
from harvcore.indexers import DATA_VOLUME_BY_VM_INDEX
from harvcore.objects import (
    VIRTUAL_MACHINE_API_VERSION,
    VIRTUAL_MACHINE_GROUP_KIND,
    VIRTUAL_MACHINE_KIND,
    NotFoundError,
    VirtualMachine,
    VirtualMachineInstanceSpec,
)
from harvcore.ref import construct, get_schema_owners_from_annotation

REMOVED_DATA_VOLUMES_ANNOTATION_KEY = "harvester.cattle.io/removedDataVolumes"


def get_data_volume_names(vmi_spec: VirtualMachineInstanceSpec) -> set[str]:
    """Return the names of the data volumes used by an instance spec."""
    return {
        volume.data_volume.name
        for volume in vmi_spec.volumes
        if volume.data_volume is not None and volume.data_volume.name
    }


def get_removed_data_volumes(vm: VirtualMachine) -> list[str]:
    """Return the data volume names listed as removed in the VM's annotations."""
    annotations = vm.annotations or {}
    return annotations.get(REMOVED_DATA_VOLUMES_ANNOTATION_KEY, "").split(",")


class VMController:
    """Handlers recording a virtual machine as owner of its data volumes."""

    def __init__(self, data_volume_client, data_volume_cache) -> None:
        self.data_volume_client = data_volume_client
        self.data_volume_cache = data_volume_cache

    def set_owner_of_data_volumes(self, key: str, vm: VirtualMachine | None):
        """Record the VM as owner of its data volumes and release detached ones."""
        if vm is None or vm.deletion_timestamp is not None or vm.spec.template is None:
            return vm

        names = get_data_volume_names(vm.spec.template.spec)
        attached = self.data_volume_cache.get_by_index(
            DATA_VOLUME_BY_VM_INDEX, construct(vm.namespace, vm.name)
        )

        for dv in attached:
            if dv.name in names:
                continue
            to_update = dv.deep_copy()

            owners = get_schema_owners_from_annotation(dv)
            was_recorded = owners.remove(VIRTUAL_MACHINE_GROUP_KIND, vm)
            if was_recorded:
                owners.bind(to_update)

            remaining = [
                reference
                for reference in dv.metadata.owner_references
                if not (
                    reference.api_version == VIRTUAL_MACHINE_API_VERSION
                    and reference.kind == VIRTUAL_MACHINE_KIND
                    and reference.name == vm.name
                )
            ]
            is_owned = len(remaining) != len(dv.metadata.owner_references)
            if is_owned:
                to_update.metadata.owner_references = remaining

            if was_recorded or is_owned:
                self.data_volume_client.update(to_update)

        for name in sorted(names):
            try:
                dv = self.data_volume_cache.get(vm.namespace, name)
            except NotFoundError:
                # The VM is requeued once the data volume shows up.
                continue
            set_ownerless_data_volume_reference(self.data_volume_client, dv, vm)

        return vm

    def unset_owner_of_data_volumes(self, key: str, vm: VirtualMachine | None):
        """Erase a deleted VM from the owners of its data volumes."""
        if vm is None or vm.deletion_timestamp is None or vm.spec.template is None:
            return vm

        names = get_data_volume_names(vm.spec.template.spec)
        removed = get_removed_data_volumes(vm)
        for name in sorted(names):
            if name in removed:
                continue
            try:
                dv = self.data_volume_cache.get(vm.namespace, name)
            except NotFoundError:
                continue
            unset_bounded_data_volume_reference(self.data_volume_client, dv, vm)

        return vm