"""
Result Writing Module

Handles writing policy documents and generated credentials to JSON files.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List

from .constants import POLICIES_SUBDIR
from .types import PolicyDocument, ProvisionedUser

# Set up logging
logger = logging.getLogger(__name__)

# Credentials files are readable by the owner only
CREDENTIALS_FILE_MODE = 0o600


def get_policy_path(policy_name: str, output_base_dir: str) -> Path:
    """
    Get the file path where a policy document should be written.

    Args:
        policy_name: Name of the policy (e.g., 'dev_policy')
        output_base_dir: Base output directory

    Returns:
        Path object for the policy file (e.g., '{output_base_dir}/policies/dev_policy.json')
    """
    return Path(output_base_dir) / POLICIES_SUBDIR / f"{policy_name}.json"


def write_policy_document(document: PolicyDocument, output_base_dir: str) -> Path:
    """
    Write a policy document to a JSON file.

    Args:
        document: Policy document to write
        output_base_dir: Base output directory

    Returns:
        Path of the written file
    """
    output_file = get_policy_path(document.name, output_base_dir)
    os.makedirs(output_file.parent, exist_ok=True)

    with open(output_file, 'w') as f:
        f.write(document.to_json())
        f.write('\n')
    logger.info(f"Wrote policy document to {output_file}")
    return output_file


def write_credentials(provisioned_users: List[ProvisionedUser], credentials_file: str) -> None:
    """
    Write generated access keys to a JSON file readable only by the owner.

    Args:
        provisioned_users: Users provisioned in this run
        credentials_file: Path of the credentials file
    """
    credentials: Dict[str, Dict[str, Any]] = {
        provisioned.identity.name: {
            "user_arn": provisioned.user_arn,
            "access_key_id": provisioned.access_key.access_key_id,
            "secret_access_key": provisioned.access_key.secret_access_key,
            "status": provisioned.access_key.status,
        }
        for provisioned in provisioned_users
    }

    output_file = Path(credentials_file)
    output_file.parent.mkdir(parents=True, exist_ok=True)

    fd = os.open(output_file, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, CREDENTIALS_FILE_MODE)
    with os.fdopen(fd, 'w') as f:
        json.dump(credentials, f, indent=2)
        f.write('\n')
    os.chmod(output_file, CREDENTIALS_FILE_MODE)
    logger.info(f"Wrote credentials for {len(credentials)} user(s) to {output_file}")
