"""Recording virtual machines as owners of data volumes."""

from __future__ import annotations

from harvcore.objects import VIRTUAL_MACHINE_GROUP_KIND, DataVolume, VirtualMachine
from harvcore.ref import get_schema_owners_from_annotation


def set_ownerless_data_volume_reference(
    data_volume_client, dv: DataVolume | None, vm: VirtualMachine | None
) -> None:
    """Record the virtual machine as an owner of the data volume, if not yet recorded."""
    if vm is None or dv is None or dv.deletion_timestamp is not None:
        return
    owners = get_schema_owners_from_annotation(dv)
    if not owners.add(VIRTUAL_MACHINE_GROUP_KIND, vm):
        return
    updated = dv.deep_copy()
    owners.bind(updated)
    data_volume_client.update(updated)


def unset_bounded_data_volume_reference(
    data_volume_client, dv: DataVolume | None, vm: VirtualMachine | None
) -> None:
    """Erase the virtual machine from the owners of the data volume, if recorded."""
    if vm is None or dv is None or dv.deletion_timestamp is not None:
        return
    owners = get_schema_owners_from_annotation(dv)
    if not owners.remove(VIRTUAL_MACHINE_GROUP_KIND, vm):
        return
    updated = dv.deep_copy()
    owners.bind(updated)
    data_volume_client.update(updated)