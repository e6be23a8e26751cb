"""
Users Terraform Generation Module

Generates Terraform files that create IAM users, their access keys, and the
attachment of the role policy selected for each user.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Set

from .models import (
    TerraformBlock,
    TerraformComment,
    TerraformElement,
    TerraformExpression,
    TerraformParameter,
    render_blocks,
)
from .utils import make_safe_variable_name, write_terraform_file
from ..constants import POLICIES_FILENAME, POLICIES_SUBDIR, PROVIDER_FILENAME, USER_FILE_SUFFIX
from ..enums import Role
from ..selection import select_policy_for_user
from ..types import PolicyDocument, UserSpec
from ..write_results import get_policy_path, write_policy_document

# Set up logging
logger = logging.getLogger(__name__)


def _build_provider_block(region: str) -> TerraformBlock:
    return TerraformBlock(
        block_type="provider",
        labels=["aws"],
        parameters=[TerraformParameter("region", region)],
    )


def _build_policy_block(document: PolicyDocument) -> TerraformBlock:
    """
    Build the aws_iam_policy resource for a policy document.

    The document itself is read from the JSON file written next to the
    Terraform files, so the rendered JSON is the single source of truth.
    """
    policy_label = make_safe_variable_name(document.name)
    policy_file = f"${{path.module}}/{POLICIES_SUBDIR}/{document.name}.json"
    return TerraformBlock(
        block_type="resource",
        labels=["aws_iam_policy", policy_label],
        parameters=[
            TerraformParameter("name", document.name),
            TerraformParameter("policy", TerraformExpression(f'file("{policy_file}")')),
        ],
    )


def _build_user_blocks(spec: UserSpec, document: PolicyDocument) -> List[TerraformBlock]:
    """
    Build the Terraform blocks for a single user.

    Args:
        spec: Desired user
        document: Policy document selected for the user

    Returns:
        aws_iam_user, aws_iam_access_key, aws_iam_user_policy_attachment and
        the sensitive secret output, in that order
    """
    user_label = make_safe_variable_name(spec.name)
    policy_label = make_safe_variable_name(document.name)
    user_ref = f"aws_iam_user.{user_label}"
    access_key_ref = f"aws_iam_access_key.{user_label}"

    user_parameters: List[TerraformElement] = [
        TerraformParameter("name", spec.name),
        TerraformParameter("path", spec.path),
        TerraformParameter("force_destroy", spec.force_destroy),
    ]

    return [
        TerraformBlock(
            block_type="resource",
            labels=["aws_iam_user", user_label],
            parameters=user_parameters,
            comment=f"{spec.name} ({spec.role.value} user, policy {document.name})",
        ),
        TerraformBlock(
            block_type="resource",
            labels=["aws_iam_access_key", user_label],
            parameters=[TerraformParameter("user", TerraformExpression(f"{user_ref}.name"))],
        ),
        TerraformBlock(
            block_type="resource",
            labels=["aws_iam_user_policy_attachment", user_label],
            parameters=[
                TerraformParameter("user", TerraformExpression(f"{user_ref}.name")),
                TerraformParameter("policy_arn", TerraformExpression(f"aws_iam_policy.{policy_label}.arn")),
            ],
        ),
        TerraformBlock(
            block_type="output",
            labels=[f"{user_label}_access_key"],
            parameters=[
                TerraformComment("Read with: terraform output -json"),
                TerraformParameter("value", TerraformExpression(
                    f"{{ id = {access_key_ref}.id, secret = {access_key_ref}.secret }}"
                )),
                TerraformParameter("sensitive", True),
            ],
        ),
    ]


def _user_filename(spec: UserSpec) -> str:
    return f"{make_safe_variable_name(spec.name)}{USER_FILE_SUFFIX}"


def _remove_stale_files(output_path: Path, expected: Set[Path]) -> List[Path]:
    """
    Delete files left by an earlier run that this run does not produce.

    Only file names the generator writes are considered, so unrelated files
    in the output directory are left alone.

    Args:
        output_path: Terraform output directory
        expected: Files this run writes

    Returns:
        Paths of the deleted files
    """
    if not output_path.is_dir():
        return []

    candidates = list(output_path.glob(f"*{USER_FILE_SUFFIX}"))
    candidates.extend(output_path / name for name in (PROVIDER_FILENAME, POLICIES_FILENAME))
    candidates.extend((output_path / POLICIES_SUBDIR).glob("*.json"))

    removed: List[Path] = []
    for path in candidates:
        if path in expected or not path.is_file():
            continue
        path.unlink()
        logger.info(f"Removed stale file {path}")
        removed.append(path)
    return removed


def _select_documents(
    specs: List[UserSpec],
    fallback_role: Optional[Role]
) -> Dict[str, PolicyDocument]:
    """
    Select the policy document for every user.

    Returns:
        Mapping of user name to selected document, in configuration order

    Raises:
        ValueError: If two user names map to the same Terraform label
    """
    labels: Dict[str, str] = {}
    for spec in specs:
        label = make_safe_variable_name(spec.name)
        if label in labels:
            raise ValueError(
                f"Users '{labels[label]}' and '{spec.name}' both map to Terraform label '{label}'"
            )
        labels[label] = spec.name

    return {spec.name: select_policy_for_user(spec, fallback_role) for spec in specs}


def generate_users_terraform(
    specs: List[UserSpec],
    output_dir: str,
    region: str,
    fallback_role: Optional[Role] = Role.QA
) -> List[Path]:
    """
    Generate Terraform files and policy documents for the configured users.

    Args:
        specs: Desired users
        output_dir: Directory to write Terraform files to
        region: Region for the aws provider block
        fallback_role: Role for users with neither flag set, or None to reject them

    Returns:
        Paths of the written Terraform files

    Raises:
        RoleSelectionError: If a user resolves to no policy (nothing is written)
    """
    output_path = Path(output_dir)

    if not specs:
        _remove_stale_files(output_path, set())
        return []

    documents_by_user = _select_documents(specs, fallback_role)

    output_path.mkdir(parents=True, exist_ok=True)

    # Only policies attached to at least one user are rendered
    used_documents: Dict[str, PolicyDocument] = {}
    for document in documents_by_user.values():
        used_documents.setdefault(document.name, document)

    expected = {output_path / PROVIDER_FILENAME, output_path / POLICIES_FILENAME}
    expected.update(get_policy_path(name, output_dir) for name in used_documents)
    expected.update(output_path / _user_filename(spec) for spec in specs)
    _remove_stale_files(output_path, expected)

    for document in used_documents.values():
        write_policy_document(document, output_dir)

    written: List[Path] = []

    provider_path = output_path / PROVIDER_FILENAME
    write_terraform_file(provider_path, _build_provider_block(region).render(), "provider")
    written.append(provider_path)

    policies_path = output_path / POLICIES_FILENAME
    policy_blocks = [_build_policy_block(document) for document in used_documents.values()]
    write_terraform_file(policies_path, render_blocks(policy_blocks), "managed policy")
    written.append(policies_path)

    for spec in specs:
        user_path = output_path / _user_filename(spec)
        content = render_blocks(_build_user_blocks(spec, documents_by_user[spec.name]))
        write_terraform_file(user_path, content, f"user {spec.name}")
        written.append(user_path)

    return written
