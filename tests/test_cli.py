"""Tests for secretsweep.cli — command line entry point."""

import logging
from unittest.mock import MagicMock, patch

from secretsweep.cli import main
from secretsweep.source.base import SourceUnavailable


class TestCli:
    def test_version_flag(self, capsys):
        rc = main(["--version"])
        assert rc == 0
        out = capsys.readouterr().out
        assert "secretsweep" in out
        assert "0.1.0" in out

    def test_invalid_config(self, capsys, clean_env, monkeypatch):
        monkeypatch.setenv("SECRETSWEEP_PAGE_SIZE", "lots")
        rc = main([])
        assert rc == 1
        assert "invalid configuration" in capsys.readouterr().err

    def test_runs_app_with_source(self, clean_env, monkeypatch, tmp_path):
        monkeypatch.setenv("SECRETSWEEP_LOG_FILE", str(tmp_path / "logs" / "sweep.log"))
        source = MagicMock()
        app = MagicMock(return_code=None)
        with (
            patch("secretsweep.source.SecretsManagerSource.from_config", return_value=source),
            patch("secretsweep.tui.app.SecretSweepApp", return_value=app) as app_cls,
            patch("logging.basicConfig"),
        ):
            rc = main([])

        assert rc == 0
        args, kwargs = app_cls.call_args
        assert args[0] is source
        assert kwargs["init_error"] is None
        app.run.assert_called_once()
        assert (tmp_path / "logs").is_dir()

    def test_unavailable_source_passed_as_init_error(self, clean_env, monkeypatch, tmp_path):
        monkeypatch.setenv("SECRETSWEEP_LOG_FILE", str(tmp_path / "sweep.log"))
        app = MagicMock(return_code=0)
        with (
            patch(
                "secretsweep.source.SecretsManagerSource.from_config",
                side_effect=SourceUnavailable("connect", "NoRegionError"),
            ),
            patch("secretsweep.tui.app.SecretSweepApp", return_value=app) as app_cls,
            patch("logging.basicConfig"),
        ):
            rc = main([])

        assert rc == 0
        args, kwargs = app_cls.call_args
        assert args[0] is None
        assert kwargs["init_error"] == "connect: NoRegionError"

    def test_quiets_botocore(self, clean_env, monkeypatch, tmp_path):
        monkeypatch.setenv("SECRETSWEEP_LOG_FILE", str(tmp_path / "sweep.log"))
        with (
            patch("secretsweep.source.SecretsManagerSource.from_config"),
            patch("secretsweep.tui.app.SecretSweepApp", return_value=MagicMock(return_code=0)),
            patch("logging.basicConfig"),
        ):
            main([])
        assert logging.getLogger("botocore").level == logging.WARNING
