"""Groups: membership directory, private-space provisioning, access resolution."""

from spacevault.groups.directory import SQLMembershipDirectory, private_group_defaults
from spacevault.groups.private_space import PrivateSpaceProvisioner
from spacevault.groups.resolver import AccessResolver

__all__ = [
    "AccessResolver",
    "PrivateSpaceProvisioner",
    "SQLMembershipDirectory",
    "private_group_defaults",
]
