import argparse
import logging
from typing import Dict, List

from boto3.session import Session
from botocore.exceptions import ClientError

from .aws.iam import DestroyBlockedError
from .aws.sessions import get_provisioning_session
from .config import IamUsersConfig
from .usage import load_yaml_config, parse_cli_args, merge_configs
from .provision import provision_users, destroy_users
from .selection import RoleSelectionError, select_policy_for_user
from .terraform.generate_users import generate_users_terraform
from .output import OutputHandler

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def setup_configuration(cli_args: argparse.Namespace, yaml_config: Dict) -> IamUsersConfig:
    """
    Merge and validate configuration from YAML and CLI arguments.

    Args:
        cli_args: Parsed command line arguments
        yaml_config: Configuration loaded from YAML file

    Returns:
        Validated IamUsersConfig object

    Raises:
        SystemExit: If configuration validation fails
    """
    try:
        final_config = merge_configs(yaml_config, cli_args)
    except (ValueError, TypeError) as e:
        OutputHandler.error("Configuration Error", e)
        exit(1)

    OutputHandler.success("Final Config", final_config.model_dump(mode="json"))

    return final_config


def print_policy_selection(final_config: IamUsersConfig) -> None:
    """
    Print which policy each configured user receives.

    Args:
        final_config: Validated configuration

    Raises:
        RoleSelectionError: If a user resolves to no policy
    """
    OutputHandler.section_header("POLICY SELECTION")
    for spec in final_config.user_specs():
        document = select_policy_for_user(spec, final_config.fallback_role)
        print(f"  {spec.name} ({spec.path}): role={spec.role.value} policy={document.name}")


def handle_generate_workflow(final_config: IamUsersConfig) -> None:
    """
    Generate Terraform files and policy documents.

    Args:
        final_config: Validated configuration
    """
    written = generate_users_terraform(
        final_config.user_specs(),
        final_config.output_dir,
        final_config.region,
        final_config.fallback_role,
    )

    if not written:
        OutputHandler.success("No users configured, nothing generated")
        return

    OutputHandler.success(f"Generated {len(written)} Terraform file(s) in {final_config.output_dir}")


def handle_apply_workflow(final_config: IamUsersConfig, session: Session) -> None:
    """
    Provision users through the IAM API and store generated credentials.

    Args:
        final_config: Validated configuration
        session: boto3 Session for the target account
    """
    provisioned = provision_users(
        session,
        final_config.user_specs(),
        final_config.fallback_role,
        final_config.credentials_file,
    )

    summary: Dict[str, str] = {
        p.identity.name: p.access_key.access_key_id for p in provisioned
    }
    OutputHandler.success(f"Provisioned {len(provisioned)} user(s)", summary)

    if provisioned and not final_config.credentials_file:
        logger.warning("No credentials_file configured; generated secret access keys were not stored")


def handle_destroy_workflow(final_config: IamUsersConfig, session: Session) -> None:
    """
    Delete the configured users through the IAM API.

    Args:
        final_config: Validated configuration
        session: boto3 Session for the target account
    """
    deleted: List[str] = destroy_users(session, final_config.user_specs())
    OutputHandler.success(f"Deleted {len(deleted)} user(s)", "\n".join(deleted))


def main() -> None:
    """Main entry point for iamusers."""
    cli_args = parse_cli_args()
    yaml_config = load_yaml_config(cli_args.config)

    final_config = setup_configuration(cli_args, yaml_config)

    try:
        # Destroy works from user names alone, so it skips selection and generation
        if not cli_args.destroy:
            print_policy_selection(final_config)
            handle_generate_workflow(final_config)

        if cli_args.apply or cli_args.destroy:
            session = get_provisioning_session(final_config.region, final_config.provisioning_role_arn)
            if cli_args.apply:
                handle_apply_workflow(final_config, session)
            else:
                handle_destroy_workflow(final_config, session)

    except RoleSelectionError as e:
        OutputHandler.error("Policy Selection Error", e)
        logger.error(f"Invalid user role configuration: {e}", exc_info=True)
        exit(1)
    except ValueError as e:
        OutputHandler.error("Configuration Error", e)
        logger.error(f"Invalid configuration: {e}", exc_info=True)
        exit(1)
    except DestroyBlockedError as e:
        OutputHandler.error("Destroy Blocked", e)
        logger.error(f"Destroy blocked: {e}", exc_info=True)
        exit(1)
    except RuntimeError as e:
        OutputHandler.error("Runtime Error", e)
        logger.error(f"Runtime error during provisioning: {e}", exc_info=True)
        exit(1)
    except ClientError as e:
        error_code = e.response['Error']['Code']
        OutputHandler.error(f"AWS API Error ({error_code})", e)
        logger.error(f"AWS API error: {e}", exc_info=True)
        exit(1)


if __name__ == "__main__":
    main()
