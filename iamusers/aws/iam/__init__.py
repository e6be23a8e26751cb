"""
AWS IAM provisioning module.

This module provides functions for reconciling IAM resources:
- User enumeration, creation and deletion, access key generation
- Customer managed policy creation and user attachment
"""

# Users and access keys
from .users import (
    DestroyBlockedError,
    IamUserAnalysis,
    create_access_key,
    create_user,
    delete_user,
    get_iam_users_analysis,
)

# Managed policies
from .policies import (
    attach_user_policy,
    delete_policy_if_unattached,
    ensure_policy,
)

__all__ = [
    # Users
    "DestroyBlockedError",
    "IamUserAnalysis",
    "create_access_key",
    "create_user",
    "delete_user",
    "get_iam_users_analysis",
    # Policies
    "attach_user_policy",
    "delete_policy_if_unattached",
    "ensure_policy",
]
