"""Owned-by annotations, index functions and reconcile handlers for VM data volumes."""

__version__ = "0.1.0"

__all__ = [
    "objects",
    "ref",
    "password",
    "indexers",
    "datavolume",
    "vm_controller",
    "vmi_controller",
    "network_controller",
    "ui",
]