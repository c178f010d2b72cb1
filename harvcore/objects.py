"""Resource objects handled by the controllers and indexers."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import datetime

VIRTUAL_MACHINE_API_VERSION = "kubevirt.io/v1"
VIRTUAL_MACHINE_KIND = "VirtualMachine"
VMI_PHASE_RUNNING = "Running"


@dataclass(frozen=True)
class GroupKind:
    """An API group together with a kind."""

    group: str
    kind: str


VIRTUAL_MACHINE_GROUP_KIND = GroupKind("kubevirt.io", VIRTUAL_MACHINE_KIND)


class NotFoundError(LookupError):
    """Raised when a requested resource does not exist."""

    def __init__(self, resource: str, namespace: str, name: str) -> None:
        self.resource = resource
        self.namespace = namespace
        self.name = name
        target = f"{namespace}/{name}" if namespace else name
        super().__init__(f'{resource} "{target}" not found')


@dataclass
class OwnerReference:
    api_version: str
    kind: str
    name: str
    uid: str = ""
    controller: bool | None = None
    block_owner_deletion: bool | None = None


@dataclass
class ObjectMeta:
    name: str = ""
    namespace: str = ""
    uid: str = ""
    annotations: dict[str, str] | None = None
    owner_references: list[OwnerReference] = field(default_factory=list)
    finalizers: list[str] = field(default_factory=list)
    deletion_timestamp: datetime | None = None


class _Resource:
    """Shortcuts to the metadata of a resource."""

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def namespace(self) -> str:
        return self.metadata.namespace

    @property
    def annotations(self) -> dict[str, str] | None:
        return self.metadata.annotations

    @property
    def deletion_timestamp(self) -> datetime | None:
        return self.metadata.deletion_timestamp


@dataclass
class DataVolumeSource:
    name: str = ""


@dataclass
class Volume:
    name: str
    data_volume: DataVolumeSource | None = None


@dataclass
class MultusNetwork:
    network_name: str


@dataclass
class Network:
    name: str
    multus: MultusNetwork | None = None
    pod: bool = False


@dataclass
class Interface:
    name: str
    mac_address: str = ""


@dataclass
class VirtualMachineInstanceSpec:
    volumes: list[Volume] = field(default_factory=list)
    networks: list[Network] = field(default_factory=list)
    interfaces: list[Interface] = field(default_factory=list)


@dataclass
class VirtualMachineInstanceTemplateSpec:
    spec: VirtualMachineInstanceSpec = field(default_factory=VirtualMachineInstanceSpec)


@dataclass
class VirtualMachineSpec:
    template: VirtualMachineInstanceTemplateSpec | None = None


@dataclass
class VirtualMachine(_Resource):
    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: VirtualMachineSpec = field(default_factory=VirtualMachineSpec)

    def deep_copy(self) -> VirtualMachine:
        """Return an independent copy of this virtual machine."""
        return copy.deepcopy(self)


@dataclass
class VirtualMachineInstanceNetworkInterface:
    name: str = ""
    mac: str = ""
    ip: str = ""


@dataclass
class VirtualMachineInstanceStatus:
    phase: str = ""
    interfaces: list[VirtualMachineInstanceNetworkInterface] = field(default_factory=list)


@dataclass
class VirtualMachineInstance(_Resource):
    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: VirtualMachineInstanceSpec = field(default_factory=VirtualMachineInstanceSpec)
    status: VirtualMachineInstanceStatus = field(default_factory=VirtualMachineInstanceStatus)


@dataclass
class DataVolume(_Resource):
    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: dict = field(default_factory=dict)

    def deep_copy(self) -> DataVolume:
        """Return an independent copy of this data volume."""
        return copy.deepcopy(self)


@dataclass
class Subject:
    kind: str
    name: str
    namespace: str = ""


@dataclass
class RoleRef:
    name: str
    kind: str = "ClusterRole"
    api_group: str = "rbac.authorization.k8s.io"


@dataclass
class ClusterRoleBinding(_Resource):
    role_ref: RoleRef
    subjects: list[Subject] = field(default_factory=list)
    metadata: ObjectMeta = field(default_factory=ObjectMeta)


@dataclass
class User(_Resource):
    username: str
    display_name: str = ""
    is_admin: bool = False
    metadata: ObjectMeta = field(default_factory=ObjectMeta)


def get_controller_of(obj) -> OwnerReference | None:
    """Return the owner reference marked as controller, if any."""
    meta = getattr(obj, "metadata", obj)
    return next((ref for ref in meta.owner_references if ref.controller), None)