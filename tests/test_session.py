# ruff: noqa: PLR2004
"""Tests for the throwaway SSH session lifecycle."""

import time
from collections.abc import Callable
from unittest.mock import MagicMock, patch

import pytest

from dockersshell.core.config import ShellConfig
from dockersshell.data import SessionTarget
from dockersshell.exceptions import (
    ContainerError,
    NoEndpointsError,
    NotOpenSessionError,
    PortResolutionError,
    ReadinessTimeoutError,
    SessionError,
)
from dockersshell.session import ShellSession

from .fakes import BannerServer, FakeContainerAPI, FakePool, running


E1 = "http://10.0.0.1:4243"
E2 = "http://10.0.0.2:4243"
E3 = "http://10.0.0.3:4243"

PoolFactory = Callable[[dict[str, FakeContainerAPI | None]], FakePool]


@pytest.fixture
def engine() -> FakeContainerAPI:
    """An idle endpoint publishing SSH on 32768."""
    return FakeContainerAPI([], ssh_port=32768)


@pytest.fixture
def pool(make_pool: PoolFactory, engine: FakeContainerAPI) -> FakePool:
    """A single-endpoint pool."""
    return make_pool({E1: engine})


def _session(pool: FakePool, **config: object) -> ShellSession:
    return ShellSession(ShellConfig(endpoints=list(pool.endpoints), **config), owner="alice", connect=pool.connect)


class TestShellSessionOpen:
    """Test ShellSession.open."""

    @patch("dockersshell.session.wait_for_ssh")
    @patch("dockersshell.naming.time.time", return_value=1700000000.0)
    def test_open_provisions_container(
        self, mock_time: MagicMock, mock_wait: MagicMock, pool: FakePool, engine: FakeContainerAPI
    ) -> None:
        """Test that open creates, starts, inspects and waits in order."""
        session = _session(pool, image="sshd")

        target = session.open()

        assert target == SessionTarget(host="10.0.0.1", port=32768)
        assert session.is_open
        assert session.container_name == "alice-1700000000"
        assert engine.calls == [
            ("list",),
            ("create", "alice-1700000000", "sshd"),
            ("start", "id-alice-1700000000"),
            ("inspect", "id-alice-1700000000"),
        ]
        mock_wait.assert_called_once_with("10.0.0.1", 32768, check_banner=True)

    @patch("dockersshell.session.wait_for_ssh")
    def test_open_uses_least_loaded_endpoint(self, mock_wait: MagicMock, make_pool: PoolFactory) -> None:
        """Test that the container lands on the idle endpoint and the rest are not queried."""
        busy, idle, other = FakeContainerAPI(running(5)), FakeContainerAPI([]), FakeContainerAPI(running(3))
        pool = make_pool({E1: busy, E2: idle, E3: other})

        _session(pool).open()

        assert E3 not in pool.connected
        assert "create" in idle.ops()
        assert "create" not in busy.ops()

    @patch("dockersshell.session.wait_for_ssh")
    def test_banner_check_follows_config(self, mock_wait: MagicMock, pool: FakePool) -> None:
        """Test that the readiness variant is taken from configuration."""
        _session(pool, check_banner=False).open()
        assert mock_wait.call_args.kwargs["check_banner"] is False

    def test_no_endpoints(self, make_pool: PoolFactory) -> None:
        """Test that an unusable pool fails before any container exists."""
        session = _session(make_pool({E1: None}))

        with pytest.raises(NoEndpointsError):
            session.open()
        assert not session.is_open

    def test_create_failure(self, pool: FakePool, engine: FakeContainerAPI) -> None:
        """Test that a create failure leaves nothing to clean up."""
        engine.fail_on.add("create")
        session = _session(pool)

        with pytest.raises(ContainerError, match="Unable to create container"):
            session.open()
        assert not session.is_open
        assert "stop" not in engine.ops()

    @pytest.mark.parametrize(
        ("failure", "error"),
        [("start", ContainerError), ("inspect", ContainerError)],
    )
    def test_failure_after_create_tears_down(
        self, pool: FakePool, engine: FakeContainerAPI, failure: str, error: type[Exception]
    ) -> None:
        """Test that the container is removed when provisioning fails after creation."""
        engine.fail_on.add(failure)
        session = _session(pool)

        with pytest.raises(error):
            session.open()

        assert engine.ops()[-2:] == ["stop", "remove"]
        assert not session.is_open

    @patch("dockersshell.session.wait_for_ssh")
    def test_readiness_timeout_tears_down(
        self, mock_wait: MagicMock, pool: FakePool, engine: FakeContainerAPI
    ) -> None:
        """Test that a readiness timeout removes the container before propagating."""
        mock_wait.side_effect = ReadinessTimeoutError("10.0.0.1", 32768, 60)
        session = _session(pool)

        with pytest.raises(ReadinessTimeoutError, match="10.0.0.1:32768 never became available"):
            session.open()

        assert engine.ops()[-2:] == ["stop", "remove"]

    @patch("dockersshell.session.wait_for_ssh")
    def test_port_resolution_error_tears_down(
        self, mock_wait: MagicMock, pool: FakePool, engine: FakeContainerAPI
    ) -> None:
        """Test that a missing port mapping is fatal and cleaned up."""
        session = _session(pool)

        with (
            patch.object(engine, "resolve_ssh_port", side_effect=PortResolutionError("id", "22/tcp is not published")),
            pytest.raises(PortResolutionError),
        ):
            session.open()

        mock_wait.assert_not_called()
        assert engine.ops()[-2:] == ["stop", "remove"]

    @patch("dockersshell.session.wait_for_ssh")
    def test_failed_teardown_keeps_original_error(
        self, mock_wait: MagicMock, pool: FakePool, engine: FakeContainerAPI
    ) -> None:
        """Test that the provisioning error propagates even if cleanup also fails."""
        mock_wait.side_effect = ReadinessTimeoutError("10.0.0.1", 32768, 60)
        engine.fail_on.add("stop")

        with pytest.raises(ReadinessTimeoutError):
            _session(pool).open()

    def test_open_end_to_end_with_banner(self, make_pool: PoolFactory) -> None:
        """Test provisioning against a listener that greets with an SSH banner."""
        with BannerServer(b"SSH-2.0-OpenSSH\r\n") as server:
            engine = FakeContainerAPI([], ssh_port=server.port)
            pool = make_pool({"http://127.0.0.1:4243": engine})
            session = _session(pool)

            start = time.monotonic()
            target = session.open()
            elapsed = time.monotonic() - start

        assert target == SessionTarget(host="127.0.0.1", port=server.port)
        assert elapsed < 0.5


class TestShellSessionInteractAndClose:
    """Test ShellSession.interact and ShellSession.close."""

    def test_interact_requires_open_session(self, pool: FakePool) -> None:
        """Test that interact before open raises."""
        with pytest.raises(NotOpenSessionError):
            _session(pool).interact()

    @patch("dockersshell.session.run_ssh", return_value=0)
    @patch("dockersshell.session.wait_for_ssh")
    def test_interact_runs_ssh(self, mock_wait: MagicMock, mock_run_ssh: MagicMock, pool: FakePool) -> None:
        """Test that ssh targets the resolved port as the login user."""
        session = _session(pool, user="admin")
        session.open()

        assert session.interact() == 0
        mock_run_ssh.assert_called_once_with(SessionTarget("10.0.0.1", 32768), "admin", invoking_user="alice")

    @patch("dockersshell.session.run_ssh", return_value=255)
    @patch("dockersshell.session.wait_for_ssh")
    def test_interact_reports_nonzero_status(
        self, mock_wait: MagicMock, mock_run_ssh: MagicMock, pool: FakePool
    ) -> None:
        """Test that a failed ssh session is returned, not raised."""
        session = _session(pool)
        session.open()

        assert session.interact() == 255
        assert session.is_open

    @patch("dockersshell.session.wait_for_ssh")
    def test_close_stops_then_removes(self, mock_wait: MagicMock, pool: FakePool, engine: FakeContainerAPI) -> None:
        """Test that close stops and removes the owned container once."""
        session = _session(pool)
        session.open()

        session.close()
        session.close()

        assert engine.ops().count("stop") == 1
        assert engine.ops()[-2:] == ["stop", "remove"]
        assert not session.is_open

    def test_close_without_container_is_noop(self, pool: FakePool, engine: FakeContainerAPI) -> None:
        """Test that closing an unopened session does nothing."""
        _session(pool).close()
        assert engine.calls == []

    @patch("dockersshell.session.wait_for_ssh")
    def test_close_failure_is_raised(self, mock_wait: MagicMock, pool: FakePool, engine: FakeContainerAPI) -> None:
        """Test that teardown errors are reported, not suppressed."""
        session = _session(pool)
        session.open()
        engine.fail_on.add("remove")

        with pytest.raises(ContainerError, match="Unable to remove container"):
            session.close()
        assert not session.is_open

    @patch("dockersshell.session.run_ssh")
    @patch("dockersshell.session.wait_for_ssh")
    def test_context_manager_tears_down_after_session_error(
        self, mock_wait: MagicMock, mock_run_ssh: MagicMock, pool: FakePool, engine: FakeContainerAPI
    ) -> None:
        """Test that a session error still removes the container."""
        mock_run_ssh.side_effect = SessionError("Unable to initiate ssh connection: ssh")

        with pytest.raises(SessionError), _session(pool) as session:
            session.interact()

        assert engine.ops()[-2:] == ["stop", "remove"]

    def test_owner_defaults_to_login_user(self, pool: FakePool) -> None:
        """Test that the login user names the container when no owner is given."""
        session = ShellSession(ShellConfig(endpoints=[E1], user="ubuntu"), connect=pool.connect)
        assert session.owner == "ubuntu"
