"""AWS integration library for iamusers provisioning."""

from .iam import (
    DestroyBlockedError,
    IamUserAnalysis,
    attach_user_policy,
    create_access_key,
    create_user,
    delete_policy_if_unattached,
    delete_user,
    ensure_policy,
    get_iam_users_analysis,
)

__all__ = [
    "DestroyBlockedError",
    "IamUserAnalysis",
    "attach_user_policy",
    "create_access_key",
    "create_user",
    "delete_policy_if_unattached",
    "delete_user",
    "ensure_policy",
    "get_iam_users_analysis",
]
