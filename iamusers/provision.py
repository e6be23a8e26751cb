"""
User provisioning workflows.

Creates and destroys the configured users through the IAM API. For each user
the selected policy document is created once as a managed policy and then
attached, after the user and its access key are created.
"""

import logging
from typing import Dict, List, Optional

import boto3
from botocore.exceptions import ClientError

from .aws.iam import (
    attach_user_policy,
    create_access_key,
    create_user,
    delete_policy_if_unattached,
    delete_user,
    ensure_policy,
    get_iam_users_analysis,
)
from .enums import Role
from .output import OutputHandler
from .policies.registry import get_policy_factory, get_registered_roles
from .selection import select_policy_for_user
from .types import PolicyDocument, ProvisionedUser, UserSpec
from .write_results import write_credentials

logger = logging.getLogger(__name__)


class PolicyArnCache:
    """Ensures each managed policy is created at most once per run."""

    def __init__(self, session: boto3.Session) -> None:
        self.session = session
        self._arns: Dict[str, str] = {}

    def get_arn(self, document: PolicyDocument) -> str:
        if document.name not in self._arns:
            self._arns[document.name] = ensure_policy(self.session, document)
        return self._arns[document.name]


def provision_user(
    session: boto3.Session,
    spec: UserSpec,
    policy_cache: PolicyArnCache,
    fallback_role: Optional[Role] = Role.QA
) -> ProvisionedUser:
    """
    Provision a single user.

    Args:
        session: boto3 Session for the target account
        spec: Desired user
        policy_cache: Managed policy cache for this run
        fallback_role: Role for users with neither flag set, or None to reject them

    Returns:
        ProvisionedUser with the generated access key

    Raises:
        RoleSelectionError: If the user resolves to no policy
        ClientError: If any IAM API call fails
    """
    # Select and ensure the policy before touching the user so a bad user
    # leaves nothing half-created
    document = select_policy_for_user(spec, fallback_role)
    policy_arn = policy_cache.get_arn(document)

    user_arn = create_user(session, spec)
    access_key = create_access_key(session, spec.name)
    attach_user_policy(session, spec.name, policy_arn)

    return ProvisionedUser(
        identity=spec,
        attached_policy=document,
        access_key=access_key,
        user_arn=user_arn,
        policy_arn=policy_arn,
    )


def provision_users(
    session: boto3.Session,
    specs: List[UserSpec],
    fallback_role: Optional[Role] = Role.QA,
    credentials_file: Optional[str] = None
) -> List[ProvisionedUser]:
    """
    Provision all configured users.

    When credentials_file is set, the keys of every user provisioned so far
    are written to it even if a later user fails, since IAM never returns a
    secret access key again.

    Args:
        session: boto3 Session for the target account
        specs: Desired users
        fallback_role: Role for users with neither flag set, or None to reject them
        credentials_file: Optional path receiving the generated access keys

    Returns:
        List of ProvisionedUser in configuration order
    """
    # Resolve every user up front so a config error aborts before any API call
    for spec in specs:
        select_policy_for_user(spec, fallback_role)

    policy_cache = PolicyArnCache(session)
    provisioned_users: List[ProvisionedUser] = []
    try:
        for spec in specs:
            provisioned = provision_user(session, spec, policy_cache, fallback_role)
            OutputHandler.user_provisioned(provisioned)
            provisioned_users.append(provisioned)
    except (ClientError, RuntimeError):
        if provisioned_users:
            logger.error(
                f"Provisioning stopped after {len(provisioned_users)} of {len(specs)} user(s)"
            )
        raise
    finally:
        if credentials_file and provisioned_users:
            write_credentials(provisioned_users, credentials_file)
    return provisioned_users


def destroy_users(session: boto3.Session, specs: List[UserSpec]) -> List[str]:
    """
    Delete the configured users that exist in the account.

    Role policies left without attachments are deleted afterwards.

    Args:
        session: boto3 Session for the target account
        specs: Users to delete

    Returns:
        Names of the deleted users
    """
    existing = {user.user_name for user in get_iam_users_analysis(session)}

    deleted: List[str] = []
    for spec in specs:
        if spec.name not in existing:
            logger.info(f"IAM user {spec.name} does not exist, skipping")
            continue
        delete_user(session, spec)
        deleted.append(spec.name)

    for role in get_registered_roles():
        delete_policy_if_unattached(session, get_policy_factory(role)().name)

    return deleted
