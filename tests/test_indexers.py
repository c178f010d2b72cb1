import pytest

from harvcore.indexers import (
    data_volume_by_vm,
    index_user_by_username,
    rb_by_role_and_subject,
    rb_role_subject_key,
    vm_by_network,
)
from harvcore.objects import (
    ClusterRoleBinding,
    DataVolume,
    MultusNetwork,
    Network,
    ObjectMeta,
    RoleRef,
    Subject,
    User,
    VirtualMachine,
    VirtualMachineInstanceSpec,
    VirtualMachineInstanceTemplateSpec,
    VirtualMachineSpec,
)
from harvcore.ref import ANNOTATION_SCHEMA_OWNER_KEY_NAME


def test_index_user_by_username():
    assert index_user_by_username(User(username="admin")) == ["admin"]


def test_rb_role_subject_key_format():
    assert rb_role_subject_key("admin", Subject(kind="User", name="alice")) == "admin.User.alice"


def test_rb_by_role_and_subject_one_key_per_subject():
    subjects = [Subject(kind="User", name="alice"), Subject(kind="Group", name="ops")]
    binding = ClusterRoleBinding(role_ref=RoleRef(name="viewer"), subjects=subjects)
    keys = rb_by_role_and_subject(binding)
    assert keys == [rb_role_subject_key("viewer", s) for s in subjects]
    assert len(keys) == 2


def test_rb_by_role_and_subject_without_subjects():
    assert rb_by_role_and_subject(ClusterRoleBinding(role_ref=RoleRef(name="viewer"))) == []


def test_data_volume_by_vm_lists_vm_owners():
    annotation = (
        '[{"schema":"kubevirt.io.virtualmachine","refs":["default/b","default/a"]},'
        '{"schema":"kubevirt.io.virtualmachineinstance","refs":["default/c"]}]'
    )
    dv = DataVolume(metadata=ObjectMeta(name="dv", namespace="default",
                                        annotations={ANNOTATION_SCHEMA_OWNER_KEY_NAME: annotation}))
    assert sorted(data_volume_by_vm(dv)) == ["default/a", "default/b"]


def test_data_volume_by_vm_without_annotation():
    assert data_volume_by_vm(DataVolume(metadata=ObjectMeta(name="dv"))) == []


def test_data_volume_by_vm_rejects_malformed_annotation():
    dv = DataVolume(metadata=ObjectMeta(name="dv", annotations={ANNOTATION_SCHEMA_OWNER_KEY_NAME: "{bad"}))
    with pytest.raises(ValueError, match="dv"):
        data_volume_by_vm(dv)


def test_vm_by_network_keeps_only_multus():
    spec = VirtualMachineInstanceSpec(networks=[
        Network(name="default", pod=True),
        Network(name="nic-1", multus=MultusNetwork("default/vlan1")),
        Network(name="nic-2", multus=MultusNetwork("default/vlan2")),
    ])
    vm = VirtualMachine(spec=VirtualMachineSpec(template=VirtualMachineInstanceTemplateSpec(spec=spec)))
    assert vm_by_network(vm) == ["default/vlan1", "default/vlan2"]


def test_vm_by_network_without_template():
    assert vm_by_network(VirtualMachine()) == []