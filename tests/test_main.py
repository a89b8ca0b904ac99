"""Tests for the CLI entrypoint and its exit codes."""

from unittest.mock import patch

import pytest
from pydantic import SecretStr

from rr_remediator import main as cli
from rr_remediator.config import Settings
from rr_remediator.errors import AuthenticationError, ClusterResolutionError

from conftest import FakeCollector, FakeSession, make_host, make_volume


@pytest.fixture
def env_settings(tmp_path):
    return Settings(
        username="administrator@vsphere.local",
        password=SecretStr("secret"),
        output_dir=tmp_path,
        _env_file=None,
    )


class TestApplyArgs:
    def test_flags_override_settings(self, env_settings, tmp_path):
        args = cli._parse_args(
            ["vc.example.com", "--cluster", "prod-01", "--insecure", "--dry-run", "--port", "8443", "-o", str(tmp_path / "out")]
        )
        settings = cli._apply_args(env_settings, args)
        assert settings.server == "vc.example.com"
        assert settings.cluster == "prod-01"
        assert settings.disable_ssl_verification is True
        assert settings.dry_run is True
        assert settings.port == 8443
        assert settings.output_dir == tmp_path / "out"
        assert settings.password.get_secret_value() == "secret"

    @patch("rr_remediator.main.Prompt.ask")
    def test_prompts_for_missing_inputs(self, ask, tmp_path):
        ask.side_effect = ["root", "hunter2", "prod-01"]
        args = cli._parse_args(["vc.example.com"])
        settings = cli._apply_args(Settings(output_dir=tmp_path, _env_file=None), args)
        assert settings.username == "root"
        assert settings.password.get_secret_value() == "hunter2"
        assert settings.cluster == "prod-01"
        assert ask.call_args_list[1].kwargs == {"password": True}

    def test_server_is_required(self):
        with pytest.raises(SystemExit):
            cli._parse_args([])


class TestMain:
    def _patch_settings(self, env_settings):
        return patch("rr_remediator.main.get_settings", return_value=env_settings)

    def test_success_exit_code(self, env_settings):
        hosts = [make_host("esx01")]
        collector = FakeCollector({"prod-01": (hosts, [make_volume("naa.1", "esx01")])})

        def fake_run(settings):
            from rr_remediator.workflow import run_workflow

            return run_workflow(
                settings=settings,
                probe=lambda *a: None,
                session_factory=lambda s, c: FakeSession(),
                collector_factory=collector,
            )

        with self._patch_settings(env_settings), patch("rr_remediator.main.run_workflow", side_effect=fake_run):
            assert cli.main(["vc.example.com", "--cluster", "prod-01"]) == 0
        assert collector.set_calls == ["naa.1"]

    @pytest.mark.parametrize(
        "error",
        [
            AuthenticationError("vCenter vc.example.com rejected the credentials"),
            ClusterResolutionError("Cluster 'prod-99' does not exist"),
        ],
    )
    def test_terminal_failure_exit_code(self, env_settings, capsys, error):
        with self._patch_settings(env_settings), patch("rr_remediator.main.run_workflow", side_effect=error):
            assert cli.main(["vc.example.com", "--cluster", "prod-99"]) == 1
        assert f"Error: {error.message}" in capsys.readouterr().err

    @pytest.mark.parametrize("interrupt", [EOFError, KeyboardInterrupt])
    @patch("rr_remediator.main.run_workflow")
    @patch("rr_remediator.main.Prompt.ask")
    def test_aborted_prompt_exit_code(self, ask, run_workflow, tmp_path, capsys, interrupt):
        ask.side_effect = interrupt
        with self._patch_settings(Settings(output_dir=tmp_path, _env_file=None)):
            assert cli.main(["vc.example.com"]) == 1
        assert "Error: input aborted" in capsys.readouterr().err
        run_workflow.assert_not_called()

    def test_unexpected_failure_exit_code(self, env_settings):
        with self._patch_settings(env_settings), patch("rr_remediator.main.run_workflow", side_effect=RuntimeError("boom")):
            assert cli.main(["vc.example.com", "--cluster", "prod-01"]) == 1
