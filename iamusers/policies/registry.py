"""
Policy registry for auto-discovery of role policy documents.

This module provides a decorator-based registry pattern that allows policy
document factories to self-register against the role they serve. Adding a
new role policy requires no changes to the selection code.
"""

from typing import Callable, Dict, List

from ..enums import Role
from ..types import PolicyDocument

PolicyFactory = Callable[[], PolicyDocument]

_POLICY_REGISTRY: Dict[Role, PolicyFactory] = {}


def register_policy(role: Role) -> Callable[[PolicyFactory], PolicyFactory]:
    """
    Decorator to register a policy document factory for a role.

    Args:
        role: Role the policy document is attached for

    Usage:
        @register_policy(Role.DEV)
        def dev_policy_document() -> PolicyDocument:
            ...
    """
    def decorator(factory: PolicyFactory) -> PolicyFactory:
        if role == Role.NONE:
            raise ValueError("Cannot register a policy for Role.NONE")
        _POLICY_REGISTRY[role] = factory
        return factory
    return decorator


def get_policy_factory(role: Role) -> PolicyFactory:
    """
    Get the policy document factory for a role.

    Args:
        role: Role to look up

    Returns:
        Policy document factory

    Raises:
        ValueError: If no policy is registered for the role
    """
    if role not in _POLICY_REGISTRY:
        raise ValueError(f"Unknown policy role: {role.value}")
    return _POLICY_REGISTRY[role]


def get_registered_roles() -> List[Role]:
    """Get all roles that have a registered policy document."""
    return list(_POLICY_REGISTRY.keys())
