"""Interfaces of collaborators the identity flows delegate to."""

from bondarys_identity.application.ports.audit_trail import AuditTrail
from bondarys_identity.application.ports.group_provisioner import (
    GroupMembership,
    GroupProvisioner,
)
from bondarys_identity.application.ports.notifier import Notifier

__all__ = [
    "AuditTrail",
    "GroupMembership",
    "GroupProvisioner",
    "Notifier",
]
