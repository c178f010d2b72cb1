"""Pinning the MAC addresses first allocated to a VM's interfaces."""

from __future__ import annotations

import logging

from harvcore.objects import VMI_PHASE_RUNNING, VirtualMachineInstance

log = logging.getLogger(__name__)


class VMNetworkController:
    """Handlers copying allocated MAC addresses back into the VM spec."""

    def __init__(self, vm_cache, vm_client, vmi_client) -> None:
        self.vm_cache = vm_cache
        self.vm_client = vm_client
        self.vmi_client = vmi_client

    def set_default_network_mac_address(self, key: str, vmi: VirtualMachineInstance | None):
        """Record the MACs reported by a running instance on its VM's interfaces.

        Guests usually keep the first MAC in their DHCP setup, and a restart
        would otherwise allocate a new one and cut the network off.
        """
        if not key or vmi is None or vmi.deletion_timestamp is not None:
            return vmi
        if vmi.status.phase != VMI_PHASE_RUNNING:
            return vmi
        if not vmi.status.interfaces:
            return vmi
        self._update_vm_default_network_mac_address(vmi)
        return vmi

    def _update_vm_default_network_mac_address(self, vmi: VirtualMachineInstance) -> None:
        log.debug("update default network mac address of the vm: %s", vmi.name)
        vm = self.vm_cache.get(vmi.namespace, vmi.name)
        vm_copy = vm.deep_copy()
        macs = {
            iface.name: iface.mac
            for iface in vmi.status.interfaces
            if iface.mac and iface.name
        }
        template = vm_copy.spec.template
        if template is not None:
            for vm_iface in template.spec.interfaces:
                mac = macs.get(vm_iface.name)
                # only fill in an address that has not been set yet
                if mac is not None and not vm_iface.mac_address:
                    log.debug(
                        "set VM %s management network %s macAddress to %s",
                        vm.name, vm_iface.name, mac,
                    )
                    vm_iface.mac_address = mac
        self.vm_client.update(vm_copy)