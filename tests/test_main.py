import argparse
import pytest
from pathlib import Path
from unittest.mock import MagicMock, patch, mock_open
from botocore.exceptions import ClientError
from iamusers.usage import load_yaml_config
from iamusers.main import (
    setup_configuration,
    print_policy_selection,
    handle_generate_workflow,
    handle_apply_workflow,
    handle_destroy_workflow,
    main,
)
from iamusers.config import IamUsersConfig
from iamusers.aws.iam import DestroyBlockedError
from iamusers.policies.documents.dev import dev_policy_document
from iamusers.types import AccessKey, ProvisionedUser, UserSpec


def make_cli_args(**overrides: object) -> argparse.Namespace:
    values = {
        "config": "config.yaml",
        "output_dir": None,
        "region": None,
        "fallback_role": None,
        "apply": False,
        "destroy": False,
    }
    values.update(overrides)
    return argparse.Namespace(**values)


class TestLoadYamlConfig:
    """Test load_yaml_config function with various scenarios."""

    def test_load_yaml_config_valid_file(self) -> None:
        yaml_content = """
        region: us-east-1
        users:
          - name: alice
            devuser: true
            qauser: false
        """
        with patch('builtins.open', mock_open(read_data=yaml_content)):
            result = load_yaml_config("test.yaml")
            assert result["region"] == "us-east-1"
            assert result["users"][0]["devuser"] is True

    def test_load_yaml_config_file_not_found(self) -> None:
        """Test handling of missing YAML file."""
        with patch('builtins.open', side_effect=FileNotFoundError):
            result = load_yaml_config("nonexistent.yaml")
            assert result == {}

    def test_load_yaml_config_empty_file(self) -> None:
        """Test loading empty YAML file."""
        with patch('builtins.open', mock_open(read_data="")):
            result = load_yaml_config("empty.yaml")
            assert result == {}

    def test_load_yaml_config_invalid_yaml(self) -> None:
        """Test handling of invalid YAML content."""
        with patch('builtins.open', mock_open(read_data="invalid: yaml: content:")):
            with pytest.raises(Exception):
                load_yaml_config("invalid.yaml")


class TestSetupConfiguration:
    """Test setup_configuration function."""

    def test_valid_configuration(self) -> None:
        with patch('iamusers.main.OutputHandler') as mock_output:
            config = setup_configuration(make_cli_args(region="eu-west-1"), {"users": [{"name": "alice"}]})

        assert config.region == "eu-west-1"
        assert config.users[0].name == "alice"
        mock_output.success.assert_called_once()

    def test_invalid_configuration_exits(self) -> None:
        with patch('iamusers.main.OutputHandler') as mock_output:
            with pytest.raises(SystemExit) as exc_info:
                setup_configuration(make_cli_args(), {"users": [{"name": "alice", "path": "no-slashes"}]})

        assert exc_info.value.code == 1
        assert mock_output.error.call_args[0][0] == "Configuration Error"


class TestPrintPolicySelection:
    """Test print_policy_selection function."""

    def test_prints_selected_policy_per_user(self) -> None:
        config = IamUsersConfig(users=[  # type: ignore[list-item]
            {"name": "alice", "devuser": True},
            {"name": "carol"},
        ])
        with patch('builtins.print') as mock_print:
            print_policy_selection(config)

        printed = [c[0][0] for c in mock_print.call_args_list]
        assert "  alice (/): role=dev policy=dev_policy" in printed
        assert "  carol (/): role=none policy=qa_policy" in printed


class TestWorkflows:
    """Test generate, apply and destroy workflows."""

    def test_generate_workflow(self, tmp_path: Path) -> None:
        config = IamUsersConfig(output_dir=str(tmp_path), users=[{"name": "alice", "devuser": True}])  # type: ignore[list-item]

        with patch('iamusers.main.OutputHandler') as mock_output:
            handle_generate_workflow(config)

        assert (tmp_path / "alice_user.tf").exists()
        assert "Generated 3 Terraform file(s)" in mock_output.success.call_args[0][0]

    def test_generate_workflow_no_users(self, tmp_path: Path) -> None:
        config = IamUsersConfig(output_dir=str(tmp_path / "out"))

        with patch('iamusers.main.OutputHandler') as mock_output:
            handle_generate_workflow(config)

        mock_output.success.assert_called_once_with("No users configured, nothing generated")
        assert not (tmp_path / "out").exists()

    @patch('iamusers.main.provision_users')
    def test_apply_workflow_passes_credentials_file(self, mock_provision_users: MagicMock) -> None:
        provisioned = ProvisionedUser(
            identity=UserSpec(name="alice", is_dev=True),
            attached_policy=dev_policy_document(),
            access_key=AccessKey(access_key_id="AKIAFAKE", secret_access_key="FAKE_SECRET"),
            user_arn="arn:aws:iam::111111111111:user/alice",
            policy_arn="arn:aws:iam::111111111111:policy/dev_policy",
        )
        mock_provision_users.return_value = [provisioned]
        config = IamUsersConfig(
            credentials_file="creds.json",
            users=[{"name": "alice", "devuser": True}],  # type: ignore[list-item]
        )
        session = MagicMock()

        with patch('iamusers.main.OutputHandler') as mock_output:
            handle_apply_workflow(config, session)

        mock_provision_users.assert_called_once_with(
            session, config.user_specs(), config.fallback_role, "creds.json"
        )
        mock_output.success.assert_called_once_with("Provisioned 1 user(s)", {"alice": "AKIAFAKE"})

    @patch('iamusers.main.provision_users')
    def test_apply_workflow_without_credentials_file(self, mock_provision_users: MagicMock) -> None:
        mock_provision_users.return_value = [MagicMock()]
        config = IamUsersConfig(users=[{"name": "alice"}])  # type: ignore[list-item]

        with patch('iamusers.main.OutputHandler'), patch('iamusers.main.logger') as mock_logger:
            handle_apply_workflow(config, MagicMock())

        assert mock_provision_users.call_args[0][3] is None
        mock_logger.warning.assert_called_once()

    @patch('iamusers.main.destroy_users', return_value=["alice"])
    def test_destroy_workflow(self, mock_destroy_users: MagicMock) -> None:
        config = IamUsersConfig(users=[{"name": "alice"}])  # type: ignore[list-item]
        session = MagicMock()

        with patch('iamusers.main.OutputHandler') as mock_output:
            handle_destroy_workflow(config, session)

        mock_destroy_users.assert_called_once_with(session, config.user_specs())
        mock_output.success.assert_called_once_with("Deleted 1 user(s)", "alice")


class TestMain:
    """Test main entry point."""

    def _run_main(self, cli_args: argparse.Namespace, yaml_config: dict) -> None:
        with patch('iamusers.main.parse_cli_args', return_value=cli_args), \
                patch('iamusers.main.load_yaml_config', return_value=yaml_config):
            main()

    def test_generate_only_does_not_touch_aws(self, tmp_path: Path) -> None:
        yaml_config = {"output_dir": str(tmp_path), "users": [{"name": "alice", "devuser": True}]}

        with patch('iamusers.main.get_provisioning_session') as mock_get_session, \
                patch('builtins.print'):
            self._run_main(make_cli_args(), yaml_config)

        mock_get_session.assert_not_called()
        assert (tmp_path / "alice_user.tf").exists()

    @patch('iamusers.main.handle_apply_workflow')
    @patch('iamusers.main.get_provisioning_session')
    def test_apply(self, mock_get_session: MagicMock, mock_apply: MagicMock, tmp_path: Path) -> None:
        yaml_config = {
            "output_dir": str(tmp_path),
            "provisioning_role_arn": "arn:aws:iam::111111111111:role/Provisioner",
            "users": [{"name": "alice", "devuser": True}],
        }

        with patch('builtins.print'):
            self._run_main(make_cli_args(apply=True), yaml_config)

        mock_get_session.assert_called_once_with("us-east-1", "arn:aws:iam::111111111111:role/Provisioner")
        assert mock_apply.call_args[0][1] is mock_get_session.return_value

    @patch('iamusers.main.handle_destroy_workflow')
    @patch('iamusers.main.handle_apply_workflow')
    @patch('iamusers.main.get_provisioning_session')
    def test_destroy(
        self,
        mock_get_session: MagicMock,
        mock_apply: MagicMock,
        mock_destroy: MagicMock,
        tmp_path: Path,
    ) -> None:
        with patch('builtins.print'):
            self._run_main(make_cli_args(destroy=True), {"output_dir": str(tmp_path)})

        mock_apply.assert_not_called()
        mock_destroy.assert_called_once()

    @patch('iamusers.main.handle_destroy_workflow')
    @patch('iamusers.main.get_provisioning_session')
    def test_destroy_skips_selection_and_generation(
        self,
        mock_get_session: MagicMock,
        mock_destroy: MagicMock,
        tmp_path: Path,
    ) -> None:
        yaml_config = {"output_dir": str(tmp_path), "fallback_role": None, "users": [{"name": "carol"}]}

        with patch('iamusers.main.OutputHandler') as mock_output:
            self._run_main(make_cli_args(destroy=True), yaml_config)

        mock_output.error.assert_not_called()
        mock_destroy.assert_called_once()
        assert not (tmp_path / "carol_user.tf").exists()

    def test_role_selection_error_exits(self, tmp_path: Path) -> None:
        yaml_config = {"output_dir": str(tmp_path), "fallback_role": None, "users": [{"name": "carol"}]}

        with patch('iamusers.main.OutputHandler') as mock_output, pytest.raises(SystemExit) as exc_info:
            self._run_main(make_cli_args(), yaml_config)

        assert exc_info.value.code == 1
        assert mock_output.error.call_args[0][0] == "Policy Selection Error"

    @patch('iamusers.main.get_provisioning_session')
    @patch('iamusers.main.handle_destroy_workflow')
    def test_destroy_blocked_exits(
        self,
        mock_destroy: MagicMock,
        mock_get_session: MagicMock,
        tmp_path: Path,
    ) -> None:
        mock_destroy.side_effect = DestroyBlockedError("alice has a login profile")

        with patch('iamusers.main.OutputHandler') as mock_output, pytest.raises(SystemExit) as exc_info:
            self._run_main(make_cli_args(destroy=True), {"output_dir": str(tmp_path)})

        assert exc_info.value.code == 1
        assert mock_output.error.call_args[0][0] == "Destroy Blocked"

    @patch('iamusers.main.get_provisioning_session')
    @patch('iamusers.main.handle_apply_workflow')
    def test_client_error_exits(
        self,
        mock_apply: MagicMock,
        mock_get_session: MagicMock,
        tmp_path: Path,
    ) -> None:
        mock_apply.side_effect = ClientError(
            {"Error": {"Code": "EntityAlreadyExists", "Message": "User alice already exists"}},
            "CreateUser"
        )

        with patch('iamusers.main.OutputHandler') as mock_output, pytest.raises(SystemExit) as exc_info:
            self._run_main(make_cli_args(apply=True), {"output_dir": str(tmp_path)})

        assert exc_info.value.code == 1
        assert mock_output.error.call_args[0][0] == "AWS API Error (EntityAlreadyExists)"
