"""Index functions used to look resources up by derived keys."""

from __future__ import annotations

from harvcore.objects import (
    VIRTUAL_MACHINE_GROUP_KIND,
    ClusterRoleBinding,
    DataVolume,
    Subject,
    User,
    VirtualMachine,
)
from harvcore.ref import get_schema_owners_from_annotation

USER_NAME_INDEX = "auth.harvester.cattle.io/user-username-index"
RB_BY_ROLE_AND_SUBJECT_INDEX = "auth.harvester.cattle.io/crb-by-role-and-subject"
DATA_VOLUME_BY_VM_INDEX = "cdi.harvester.cattle.io/datavolume-by-vm"
VM_BY_NETWORK_INDEX = "vm.harvester.cattle.io/vm-by-network"


def index_user_by_username(obj: User) -> list[str]:
    """Index a user by its username."""
    return [obj.username]


def rb_role_subject_key(role_name: str, subject: Subject) -> str:
    """Build the key joining a role name with a binding subject."""
    return f"{role_name}.{subject.kind}.{subject.name}"


def rb_by_role_and_subject(obj: ClusterRoleBinding) -> list[str]:
    """Index a cluster role binding by its role and each of its subjects."""
    return [rb_role_subject_key(obj.role_ref.name, subject) for subject in obj.subjects]


def data_volume_by_vm(obj: DataVolume) -> list[str]:
    """Index a data volume by the virtual machines recorded as its owners."""
    try:
        owners = get_schema_owners_from_annotation(obj)
    except ValueError as err:
        raise ValueError(
            f"failed to get schema owners from datavolume {obj.name}'s annotation: {err}"
        ) from err
    return owners.list(VIRTUAL_MACHINE_GROUP_KIND)


def vm_by_network(obj: VirtualMachine) -> list[str]:
    """Index a virtual machine by the names of its multus networks."""
    template = obj.spec.template
    if template is None:
        return []
    return [
        network.multus.network_name
        for network in template.spec.networks
        if network.multus is not None
    ]