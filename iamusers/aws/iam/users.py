"""
AWS IAM user provisioning.

This module contains functions for listing, creating and deleting IAM users
and their access keys.
"""

import logging
from dataclasses import dataclass
from typing import List

import boto3
from botocore.exceptions import ClientError
from mypy_boto3_iam.client import IAMClient

from ...types import AccessKey, UserSpec

# Set up logging
logger = logging.getLogger(__name__)


class DestroyBlockedError(RuntimeError):
    """Raised when a user has dependent resources and force_destroy is not set."""


@dataclass
class IamUserAnalysis:
    """
    Analysis of an IAM user.

    Attributes:
        user_name: Name of the IAM user
        user_arn: ARN of the IAM user
        path: Path of the IAM user
    """
    user_name: str
    user_arn: str
    path: str


def get_iam_users_analysis(session: boto3.Session) -> List[IamUserAnalysis]:
    """
    Get all IAM users in an account.

    Args:
        session: boto3 Session for the target account

    Returns:
        List of IamUserAnalysis for all IAM users
    """
    iam_client: IAMClient = session.client("iam")
    results: List[IamUserAnalysis] = []

    paginator = iam_client.get_paginator("list_users")
    try:
        for page in paginator.paginate():
            for user in page.get("Users", []):
                results.append(IamUserAnalysis(
                    user_name=user["UserName"],
                    user_arn=user["Arn"],
                    path=user["Path"]
                ))
    except ClientError as e:
        logger.error(f"Failed to list IAM users from AWS API: {e}")
        raise

    return results


def create_user(session: boto3.Session, spec: UserSpec) -> str:
    """
    Create an IAM user.

    Args:
        session: boto3 Session for the target account
        spec: Desired user

    Returns:
        ARN of the created user

    Raises:
        ClientError: If the user already exists or creation is denied
    """
    iam_client: IAMClient = session.client("iam")
    try:
        resp = iam_client.create_user(UserName=spec.name, Path=spec.path)
    except ClientError as e:
        logger.error(f"Failed to create IAM user {spec.name}: {e}")
        raise

    user_arn: str = resp["User"]["Arn"]
    logger.info(f"Created IAM user {spec.name} ({user_arn})")
    return user_arn


def create_access_key(session: boto3.Session, user_name: str) -> AccessKey:
    """
    Generate an access key bound to an IAM user.

    Args:
        session: boto3 Session for the target account
        user_name: Name of the IAM user

    Returns:
        Generated AccessKey

    Raises:
        ClientError: If key creation fails (e.g., LimitExceeded)
    """
    iam_client: IAMClient = session.client("iam")
    try:
        resp = iam_client.create_access_key(UserName=user_name)
    except ClientError as e:
        logger.error(f"Failed to create access key for IAM user {user_name}: {e}")
        raise

    key = resp["AccessKey"]
    logger.info(f"Created access key {key['AccessKeyId']} for IAM user {user_name}")
    return AccessKey(
        access_key_id=key["AccessKeyId"],
        secret_access_key=key["SecretAccessKey"],
        status=key["Status"],
    )


def _get_login_profile_exists(iam_client: IAMClient, user_name: str) -> bool:
    try:
        iam_client.get_login_profile(UserName=user_name)
    except ClientError as e:
        if e.response.get('Error', {}).get('Code') == 'NoSuchEntity':
            return False
        raise
    return True


def _remove_dependent_resources(iam_client: IAMClient, spec: UserSpec) -> None:
    """
    Remove resources that block user deletion but were not created by iamusers.

    Args:
        iam_client: IAM client
        spec: User being destroyed

    Raises:
        DestroyBlockedError: If dependent resources exist and force_destroy is False
    """
    has_login_profile = _get_login_profile_exists(iam_client, spec.name)
    mfa_devices = iam_client.list_mfa_devices(UserName=spec.name).get("MFADevices", [])
    inline_policies = iam_client.list_user_policies(UserName=spec.name).get("PolicyNames", [])
    groups = iam_client.list_groups_for_user(UserName=spec.name).get("Groups", [])
    certificates = iam_client.list_signing_certificates(UserName=spec.name).get("Certificates", [])
    ssh_keys = iam_client.list_ssh_public_keys(UserName=spec.name).get("SSHPublicKeys", [])
    service_credentials = iam_client.list_service_specific_credentials(
        UserName=spec.name
    ).get("ServiceSpecificCredentials", [])

    if not (has_login_profile or mfa_devices or inline_policies or groups
            or certificates or ssh_keys or service_credentials):
        return

    if not spec.force_destroy:
        raise DestroyBlockedError(
            f"IAM user {spec.name} has a login profile, MFA devices, inline policies, "
            f"group memberships, signing certificates, SSH keys or service-specific "
            f"credentials; set force_destroy to remove them"
        )

    if has_login_profile:
        iam_client.delete_login_profile(UserName=spec.name)
    for device in mfa_devices:
        iam_client.deactivate_mfa_device(UserName=spec.name, SerialNumber=device["SerialNumber"])
    for policy_name in inline_policies:
        iam_client.delete_user_policy(UserName=spec.name, PolicyName=policy_name)
    for group in groups:
        iam_client.remove_user_from_group(UserName=spec.name, GroupName=group["GroupName"])
    for certificate in certificates:
        iam_client.delete_signing_certificate(UserName=spec.name, CertificateId=certificate["CertificateId"])
    for ssh_key in ssh_keys:
        iam_client.delete_ssh_public_key(UserName=spec.name, SSHPublicKeyId=ssh_key["SSHPublicKeyId"])
    for credential in service_credentials:
        iam_client.delete_service_specific_credential(
            UserName=spec.name,
            ServiceSpecificCredentialId=credential["ServiceSpecificCredentialId"]
        )
    logger.info(f"Removed dependent resources of IAM user {spec.name}")


def delete_user(session: boto3.Session, spec: UserSpec) -> None:
    """
    Delete an IAM user along with its access keys and policy attachments.

    Args:
        session: boto3 Session for the target account
        spec: User to delete

    Raises:
        DestroyBlockedError: If the user has dependent resources and force_destroy is False
        ClientError: If any IAM API call fails
    """
    iam_client: IAMClient = session.client("iam")
    try:
        _remove_dependent_resources(iam_client, spec)

        attached = iam_client.list_attached_user_policies(UserName=spec.name).get("AttachedPolicies", [])
        for policy in attached:
            iam_client.detach_user_policy(UserName=spec.name, PolicyArn=policy["PolicyArn"])

        keys = iam_client.list_access_keys(UserName=spec.name).get("AccessKeyMetadata", [])
        for key in keys:
            iam_client.delete_access_key(UserName=spec.name, AccessKeyId=key["AccessKeyId"])

        iam_client.delete_user(UserName=spec.name)
    except ClientError as e:
        logger.error(f"Failed to delete IAM user {spec.name}: {e}")
        raise

    logger.info(f"Deleted IAM user {spec.name}")
