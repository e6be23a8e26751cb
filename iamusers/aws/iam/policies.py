"""
AWS IAM managed policy provisioning.

This module contains functions for creating customer managed policies from
policy documents and attaching them to IAM users.
"""

import json
import logging
from typing import Optional
from urllib.parse import unquote

import boto3
from botocore.exceptions import ClientError
from mypy_boto3_iam.client import IAMClient
from mypy_boto3_iam.type_defs import PolicyTypeDef

from ...types import PolicyDocument

# Set up logging
logger = logging.getLogger(__name__)

# IAM keeps at most five versions of a managed policy
MAX_POLICY_VERSIONS = 5

# Tag marking policies created by iamusers; destroy only deletes tagged policies
MANAGED_BY_TAG_KEY = "ManagedBy"
MANAGED_BY_TAG_VALUE = "iamusers"


def _find_local_policy(iam_client: IAMClient, policy_name: str) -> Optional[PolicyTypeDef]:
    """Find a customer managed policy by name, or None if it does not exist."""
    paginator = iam_client.get_paginator("list_policies")
    for page in paginator.paginate(Scope="Local"):
        for policy in page.get("Policies", []):
            if policy["PolicyName"] == policy_name:
                return policy
    return None


def _default_document_matches(iam_client: IAMClient, policy: PolicyTypeDef, document: PolicyDocument) -> bool:
    """Check whether the default version of a managed policy already holds the document."""
    version_id = policy.get("DefaultVersionId")
    if not version_id:
        return False
    version = iam_client.get_policy_version(PolicyArn=policy["Arn"], VersionId=version_id)["PolicyVersion"]
    stored = version.get("Document")
    # boto3 decodes the URL-encoded document; raw responses keep the string form
    if isinstance(stored, str):
        stored = json.loads(unquote(stored))
    return stored == document.to_dict()


def _is_managed_by_iamusers(iam_client: IAMClient, policy_arn: str) -> bool:
    tags = iam_client.list_policy_tags(PolicyArn=policy_arn).get("Tags", [])
    return any(
        tag["Key"] == MANAGED_BY_TAG_KEY and tag["Value"] == MANAGED_BY_TAG_VALUE
        for tag in tags
    )


def _update_policy_document(iam_client: IAMClient, policy_arn: str, document: PolicyDocument) -> None:
    """
    Make the given document the default version of an existing managed policy.

    The oldest non-default version is deleted first when the version limit is reached.
    """
    versions = iam_client.list_policy_versions(PolicyArn=policy_arn).get("Versions", [])
    if len(versions) >= MAX_POLICY_VERSIONS:
        non_default = [v for v in versions if not v["IsDefaultVersion"]]
        oldest = min(non_default, key=lambda v: v["CreateDate"])
        iam_client.delete_policy_version(PolicyArn=policy_arn, VersionId=oldest["VersionId"])

    iam_client.create_policy_version(
        PolicyArn=policy_arn,
        PolicyDocument=document.to_json(indent=None),
        SetAsDefault=True
    )


def ensure_policy(session: boto3.Session, document: PolicyDocument) -> str:
    """
    Create a customer managed policy from a document, or update the existing one.

    New policies are tagged as managed by iamusers. An existing policy gets a
    new default version only when its current document differs.

    Args:
        session: boto3 Session for the target account
        document: Policy document to provision

    Returns:
        ARN of the managed policy

    Raises:
        ClientError: If any IAM API call fails
    """
    iam_client: IAMClient = session.client("iam")
    try:
        resp = iam_client.create_policy(
            PolicyName=document.name,
            PolicyDocument=document.to_json(indent=None),
            Tags=[{"Key": MANAGED_BY_TAG_KEY, "Value": MANAGED_BY_TAG_VALUE}]
        )
        policy_arn: str = resp["Policy"]["Arn"]
        logger.info(f"Created managed policy {document.name} ({policy_arn})")
        return policy_arn
    except ClientError as e:
        if e.response.get('Error', {}).get('Code') != 'EntityAlreadyExists':
            logger.error(f"Failed to create managed policy {document.name}: {e}")
            raise

    existing = _find_local_policy(iam_client, document.name)
    if existing is None:
        raise RuntimeError(f"Managed policy {document.name} reported as existing but was not found")

    policy_arn = existing["Arn"]
    try:
        if _default_document_matches(iam_client, existing, document):
            logger.info(f"Managed policy {document.name} is up to date ({policy_arn})")
            return policy_arn
        _update_policy_document(iam_client, policy_arn, document)
    except ClientError as e:
        logger.error(f"Failed to update managed policy {document.name}: {e}")
        raise
    logger.info(f"Updated managed policy {document.name} ({policy_arn})")
    return policy_arn


def attach_user_policy(session: boto3.Session, user_name: str, policy_arn: str) -> None:
    """
    Attach a managed policy to an IAM user.

    Args:
        session: boto3 Session for the target account
        user_name: Name of the IAM user
        policy_arn: ARN of the managed policy

    Raises:
        ClientError: If the attachment fails
    """
    iam_client: IAMClient = session.client("iam")
    try:
        iam_client.attach_user_policy(UserName=user_name, PolicyArn=policy_arn)
    except ClientError as e:
        logger.error(f"Failed to attach {policy_arn} to IAM user {user_name}: {e}")
        raise
    logger.info(f"Attached {policy_arn} to IAM user {user_name}")


def delete_policy_if_unattached(session: boto3.Session, policy_name: str) -> bool:
    """
    Delete a customer managed policy once nothing is attached to it.

    Only policies tagged as managed by iamusers are deleted. Non-default
    versions are deleted first, as IAM requires.

    Args:
        session: boto3 Session for the target account
        policy_name: Name of the managed policy

    Returns:
        True if the policy was deleted, False if it does not exist, is not
        managed by iamusers or is still attached

    Raises:
        ClientError: If any IAM API call fails
    """
    iam_client: IAMClient = session.client("iam")
    try:
        policy = _find_local_policy(iam_client, policy_name)
        if policy is None:
            return False

        policy_arn = policy["Arn"]
        if not _is_managed_by_iamusers(iam_client, policy_arn):
            logger.info(f"Managed policy {policy_name} was not created by iamusers, keeping it")
            return False

        # Re-read the policy; list_policies may report a stale attachment count
        attachment_count = iam_client.get_policy(PolicyArn=policy_arn)["Policy"].get("AttachmentCount", 0)
        if attachment_count > 0:
            logger.info(f"Managed policy {policy_name} is still attached, keeping it")
            return False

        versions = iam_client.list_policy_versions(PolicyArn=policy_arn).get("Versions", [])
        for version in versions:
            if not version["IsDefaultVersion"]:
                iam_client.delete_policy_version(PolicyArn=policy_arn, VersionId=version["VersionId"])
        iam_client.delete_policy(PolicyArn=policy_arn)
    except ClientError as e:
        logger.error(f"Failed to delete managed policy {policy_name}: {e}")
        raise

    logger.info(f"Deleted managed policy {policy_name} ({policy_arn})")
    return True
