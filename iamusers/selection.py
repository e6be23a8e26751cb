"""
Role resolution and policy selection.

Users carry the legacy devuser/qauser flags. They are folded into a single
Role, and a Role is resolved to exactly one policy document. Users with
neither flag set resolve through a configurable fallback role.
"""

import logging
from typing import Optional

from .enums import Role
from .policies.registry import get_policy_factory
from .types import PolicyDocument, UserSpec

logger = logging.getLogger(__name__)


class RoleSelectionError(ValueError):
    """Raised when a user cannot be resolved to a policy document."""


def resolve_role(role: Role, fallback_role: Optional[Role] = Role.QA) -> Role:
    """
    Resolve a role to one that has a policy document.

    Args:
        role: Role derived from the user's flags
        fallback_role: Role used when no flag is set, or None to reject such users

    Returns:
        Role.DEV or Role.QA

    Raises:
        RoleSelectionError: If role is Role.NONE and no usable fallback is configured
    """
    if role != Role.NONE:
        return role

    if fallback_role is None or fallback_role == Role.NONE:
        raise RoleSelectionError("Neither devuser nor qauser is set and no fallback_role is configured")

    logger.debug(f"No role flag set, falling back to {fallback_role.value}")
    return fallback_role


def select_policy(role: Role) -> PolicyDocument:
    """
    Select the policy document for a role.

    Args:
        role: Role.DEV or Role.QA

    Returns:
        The role's policy document

    Raises:
        RoleSelectionError: If role is Role.NONE
    """
    if role == Role.DEV:
        return get_policy_factory(Role.DEV)()
    if role == Role.QA:
        return get_policy_factory(Role.QA)()
    raise RoleSelectionError(f"No policy document for role '{role.value}'")


def select_policy_for_user(spec: UserSpec, fallback_role: Optional[Role] = Role.QA) -> PolicyDocument:
    """
    Select the policy document attached to a user.

    If the devuser flag is set the Dev policy is selected regardless of the
    qauser flag. Otherwise the QA policy is selected, either because qauser is
    set or through the fallback role.

    Args:
        spec: Desired user
        fallback_role: Role used when neither flag is set, or None to reject

    Returns:
        Selected PolicyDocument

    Raises:
        RoleSelectionError: If the user resolves to no role
    """
    try:
        role = resolve_role(spec.role, fallback_role)
    except RoleSelectionError as e:
        raise RoleSelectionError(f"User '{spec.name}': {e}") from e
    return select_policy(role)
