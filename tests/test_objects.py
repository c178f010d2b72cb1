from datetime import datetime

from harvcore.objects import (
    DataVolume,
    GroupKind,
    NotFoundError,
    ObjectMeta,
    OwnerReference,
    VirtualMachine,
    VirtualMachineInstance,
    VirtualMachineInstanceSpec,
    VirtualMachineInstanceTemplateSpec,
    VirtualMachineSpec,
    Volume,
    DataVolumeSource,
    get_controller_of,
)


def _vm_owner(controller):
    return OwnerReference(
        api_version="kubevirt.io/v1",
        kind="VirtualMachine",
        name="test",
        uid="fake-vm-uid",
        controller=controller,
        block_owner_deletion=True,
    )


def test_get_controller_of_returns_controller_reference():
    other = OwnerReference(api_version="apps/v1", kind="Deployment", name="x")
    owner = _vm_owner(True)
    vmi = VirtualMachineInstance(
        metadata=ObjectMeta(namespace="default", name="test", owner_references=[other, owner])
    )
    assert get_controller_of(vmi) is owner


def test_get_controller_of_ignores_non_controller_references():
    vmi = VirtualMachineInstance(
        metadata=ObjectMeta(namespace="default", name="test", owner_references=[_vm_owner(None)])
    )
    assert get_controller_of(vmi) is None


def test_get_controller_of_without_references():
    assert get_controller_of(VirtualMachineInstance()) is None


def test_resource_properties_mirror_metadata():
    stamp = datetime(2021, 1, 1)
    dv = DataVolume(
        metadata=ObjectMeta(
            namespace="default", name="dv-disk", annotations={"a": "b"}, deletion_timestamp=stamp
        )
    )
    assert dv.name == "dv-disk"
    assert dv.namespace == "default"
    assert dv.annotations == {"a": "b"}
    assert dv.deletion_timestamp == stamp


def test_virtual_machine_deep_copy_is_independent():
    vm = VirtualMachine(
        metadata=ObjectMeta(namespace="default", name="test"),
        spec=VirtualMachineSpec(
            template=VirtualMachineInstanceTemplateSpec(
                spec=VirtualMachineInstanceSpec(
                    volumes=[Volume(name="disk2", data_volume=DataVolumeSource(name="dv-disk"))]
                )
            )
        ),
    )
    clone = vm.deep_copy()
    assert clone == vm
    clone.spec.template.spec.volumes[0].data_volume.name = "changed"
    assert vm.spec.template.spec.volumes[0].data_volume.name == "dv-disk"


def test_data_volume_deep_copy_is_independent():
    dv = DataVolume(
        metadata=ObjectMeta(
            namespace="default",
            name="dv-disk",
            annotations={"k": "v"},
            owner_references=[_vm_owner(True)],
        )
    )
    clone = dv.deep_copy()
    assert clone == dv
    clone.metadata.annotations["k"] = "other"
    clone.metadata.owner_references.clear()
    assert dv.metadata.annotations == {"k": "v"}
    assert len(dv.metadata.owner_references) == 1


def test_not_found_error_is_lookup_error():
    error = NotFoundError("datavolumes", "default", "dv-disk")
    assert isinstance(error, LookupError)
    assert error.name == "dv-disk"
    assert error.namespace == "default"
    assert "default/dv-disk" in str(error)


def test_group_kind_is_hashable_value():
    mapping = {GroupKind("kubevirt.io", "VirtualMachine"): 1}
    assert mapping[GroupKind("kubevirt.io", "VirtualMachine")] == 1