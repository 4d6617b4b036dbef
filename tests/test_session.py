"""Tests for bw_export/session.py."""

import pytest

from bw_export.errors import SessionAcquisitionError
from bw_export.session import SessionProvider

from conftest import FakeVaultCLI


def test_logged_in_unlocks():
    cli = FakeVaultCLI(logged_in=True, token="abc123")

    assert SessionProvider(cli).acquire() == "abc123"
    assert cli.calls == [("check_login",), ("unlock",)]


def test_logged_out_logs_in():
    cli = FakeVaultCLI(logged_in=False, token="xyz")

    assert SessionProvider(cli).acquire() == "xyz"
    assert cli.calls == [("check_login",), ("login",)]


@pytest.mark.parametrize("logged_in,action", [(True, "unlock"), (False, "login")])
def test_cli_failure_raises(logged_in, action):
    cli = FakeVaultCLI(logged_in=logged_in, auth_returncode=1)

    with pytest.raises(SessionAcquisitionError, match=action):
        SessionProvider(cli).acquire()


def test_empty_token_raises():
    cli = FakeVaultCLI(token="  ")

    with pytest.raises(SessionAcquisitionError, match="did not return"):
        SessionProvider(cli).acquire()
