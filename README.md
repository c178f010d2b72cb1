# harvcore

Ownership bookkeeping for virtual machines and their data volumes.

A data volume records the virtual machines that use it in the
`harvester.cattle.io/owned-by` annotation. The value is a JSON list of
`{"schema": ..., "refs": [...]}` entries, sorted by schema ID, with each
`refs` list sorted too. This package reads and writes that annotation and
keeps it in step with virtual machine specs.

## Install

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `harvcore.objects` holds plain dataclasses for the resources involved:
  `VirtualMachine`, `VirtualMachineInstance`, `DataVolume`, `ObjectMeta`,
  `OwnerReference`, `Volume`, `Network`, `Interface`, `ClusterRoleBinding`,
  `Subject`, `RoleRef`, `User` and the spec and status parts. It also has
  `GroupKind`, `NotFoundError` (a `LookupError` that caches are expected to
  raise for a missing resource) and `get_controller_of`, which returns the
  owner reference marked as controller, or `None`.
- `harvcore.ref` has `parse` and `construct` for `namespace/name` IDs,
  `group_kind_to_schema_id` (`"<group>.<kind>"`, lower case), and
  `AnnotationSchemaOwners`, a dict of `AnnotationSchemaReference` keyed by
  schema ID. It supports `add`, `remove`, `has`, `list`, `bind`, `to_json`
  and `from_json`; entries with the same schema ID are merged when read.
  `get_schema_owners_from_annotation` reads the owners from an object and
  raises `ValueError` if the annotation is not valid.
- `harvcore.indexers` has the index functions `index_user_by_username`,
  `rb_by_role_and_subject` (keys built by `rb_role_subject_key` as
  `role.kind.name`), `data_volume_by_vm` and `vm_by_network` (Multus network
  names), with the index name constants.
- `harvcore.datavolume` has `set_ownerless_data_volume_reference` and
  `unset_bounded_data_volume_reference`, which add or erase a VM in a data
  volume's owned-by annotation and call the client's `update` with a copy
  only when something changed.
- `harvcore.vm_controller.VMController(data_volume_client, data_volume_cache)`:
  `set_owner_of_data_volumes` records a VM as owner of the data volumes in its
  template and releases detached ones (annotation and VM owner references);
  `unset_owner_of_data_volumes` erases a deleted VM from its data volumes,
  skipping those listed in the `harvester.cattle.io/removedDataVolumes`
  annotation.
- `harvcore.vmi_controller.VMIController(virtual_machine_cache, data_volume_client, data_volume_cache)`:
  `unset_owner_of_data_volumes` erases the parent VM from data volumes that a
  deleted instance used but the VM's template no longer declares.
- `harvcore.network_controller.VMNetworkController(vm_cache, vm_client, vmi_client)`:
  `set_default_network_mac_address` copies the MAC addresses reported by a
  running instance onto the VM's interfaces that have none yet, then calls
  `vm_client.update`.
- `harvcore.password`: `hash_password_string` makes a bcrypt hash at cost 10
  and `check_password` checks one.
- `harvcore.ui`: `js_url` and `css_url` pick the bundled API UI assets or
  `""`; `serve_index` copies a URL's body to a file object without verifying
  TLS; `UIHandler` decides between a remote index page and a packaged UI
  directory (`path`, `can_download`, which tries once and remembers the
  result) and writes the index page with `index_file`.

Caches are objects with `get(namespace, name)` (and `get_by_index(index, key)`
for the data volume cache); clients have `update(obj)`. You supply both. A
`NotFoundError` from a cache makes the handlers skip that resource; any other
error is passed on.

## Example

```python
from harvcore.objects import GroupKind, ObjectMeta, DataVolume, VirtualMachine
from harvcore.ref import get_schema_owners_from_annotation

vm_gk = GroupKind(group="kubevirt.io", kind="VirtualMachine")
vm = VirtualMachine(metadata=ObjectMeta(namespace="default", name="test"))
dv = DataVolume(metadata=ObjectMeta(namespace="default", name="dv-disk"))

owners = get_schema_owners_from_annotation(dv)
owners.add(vm_gk, vm)
owners.bind(dv)
print(dv.metadata.annotations)
# {'harvester.cattle.io/owned-by': '[{"schema":"kubevirt.io.virtualmachine","refs":["default/test"]}]'}
```

## What it does not do

There is no command, no HTTP server and no connection to a cluster. The
handlers are plain methods: nothing here watches resources, runs a
reconcile loop or registers the index functions. `UIHandler` only chooses
and writes the index page; it does not serve assets or route requests.