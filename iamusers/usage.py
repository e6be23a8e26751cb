import argparse
import yaml
from typing import Any, Dict
from .config import IamUsersConfig
from .enums import Role


def load_yaml_config(path: str) -> Dict[str, Any]:
    """
    Load configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file

    Returns:
        Dictionary containing the loaded configuration, or empty dict if file not found
    """
    try:
        with open(path, 'r') as f:
            return yaml.safe_load(f) or {}
    except FileNotFoundError:
        print(f"Config file '{path}' not found. Continuing without it.")
        return {}


def parse_cli_args() -> argparse.Namespace:
    """
    Parse command line arguments for the iamusers tool.

    Returns:
        Parsed command line arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog="iamusers",
        description="iamusers - generate Terraform and provision IAM users with role policies"
    )

    parser.add_argument(
        '--config',
        required=True,
        type=str,
        help='Path to config YAML'
    )

    # Overrides (override YAML if provided)
    parser.add_argument(
        '--output-dir',
        dest='output_dir',
        type=str,
        help='Directory to output Terraform and policy JSON (default build/iam)'
    )
    parser.add_argument(
        '--region',
        dest='region',
        type=str,
        help='AWS region for the provider and boto3 sessions (default us-east-1)'
    )
    parser.add_argument(
        '--fallback-role',
        dest='fallback_role',
        type=str,
        choices=[Role.DEV.value, Role.QA.value],
        help='Role for users with neither devuser nor qauser set (default qa)'
    )

    # Provisioning mode
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        '--apply',
        action='store_true',
        help='Create users, access keys and policy attachments through the IAM API'
    )
    mode.add_argument(
        '--destroy',
        action='store_true',
        help='Delete the configured users through the IAM API'
    )

    return parser.parse_args()


def merge_configs(yaml_config: Dict[str, Any], cli_args: argparse.Namespace) -> IamUsersConfig:
    """
    Merge YAML configuration with CLI arguments and validate the result.

    Args:
        yaml_config: Configuration loaded from YAML file
        cli_args: Parsed command line arguments

    Returns:
        Validated IamUsersConfig object

    Raises:
        ValueError: If configuration validation fails
        TypeError: If configuration has type errors
    """
    # Start with YAML
    merged = yaml_config.copy()

    # Apply CLI overrides (only if CLI provided them)
    cli_dict = {
        k: v for k, v in vars(cli_args).items()
        if k in IamUsersConfig.model_fields and v is not None
    }
    merged.update(cli_dict)

    # Validate and return final config (will raise if fields have wrong types)
    return IamUsersConfig(**merged)
