from pathlib import Path
from unittest.mock import MagicMock

import pytest

from inboxer import cli
from inboxer.auth import AuthorizationError
from inboxer.config import Settings


@pytest.fixture
def authenticator(monkeypatch, tmp_path):
    """Replace the authenticator and settings used by the CLI."""

    instance = MagicMock()
    factory = MagicMock(return_value=instance)
    monkeypatch.setattr(cli, "GmailAuthenticator", factory)
    monkeypatch.setattr(cli, "get_settings", lambda: Settings(token_dir=tmp_path))
    monkeypatch.setattr(cli, "setup_logging", lambda level: None)
    return factory, instance


def test_missing_credentials_argument_prints_usage(capsys) -> None:
    """Running without a credentials path exits with a usage message."""

    with pytest.raises(SystemExit) as excinfo:
        cli.main([])

    assert excinfo.value.code == 2
    assert "usage: inboxer-setup" in capsys.readouterr().err


def test_setup_forwards_credentials_and_scopes(authenticator, tmp_path) -> None:
    """CLI arguments are applied to the settings given to the authenticator."""

    factory, instance = authenticator

    exit_code = cli.main(
        [
            "creds.json",
            "--scope",
            "https://www.googleapis.com/auth/gmail.readonly",
            "--token-dir",
            str(tmp_path / "tokens"),
        ]
    )

    assert exit_code == 0
    settings = factory.call_args.args[0]
    assert settings.credentials_path == Path("creds.json")
    assert settings.scopes == ["https://www.googleapis.com/auth/gmail.readonly"]
    assert settings.token_cache_path == tmp_path / "tokens" / "gmail-token.json"
    instance.setup.assert_called_once_with()
    instance.logout.assert_not_called()


def test_default_scope_is_full_mailbox(authenticator) -> None:
    factory, _ = authenticator

    cli.main(["creds.json"])

    assert factory.call_args.args[0].scopes == ["https://mail.google.com/"]


def test_force_clears_cached_token_first(authenticator) -> None:
    _, instance = authenticator
    calls = []
    instance.logout.side_effect = lambda: calls.append("logout")
    instance.setup.side_effect = lambda: calls.append("setup")

    assert cli.main(["creds.json", "--force"]) == 0

    assert calls == ["logout", "setup"]


def test_authorization_failure_returns_error_code(authenticator, capsys) -> None:
    """A failed exchange is reported and mapped to exit code 1."""

    _, instance = authenticator
    instance.setup.side_effect = AuthorizationError("unable to retrieve token from web")

    assert cli.main(["creds.json"]) == 1

    assert "unable to retrieve token from web" in capsys.readouterr().out
