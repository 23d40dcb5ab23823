"""
Unit tests for the bootstrap orchestrator.

Tests focus on:
- Full resolution into a frozen snapshot
- Fatal conditions and the single termination point
- One-time publication
- Forced interface registration
"""
import dataclasses
import logging

import pytest

from fxpanel.domain.exceptions import ExitCode
from fxpanel.domain.models import DevEnabled, ManagedZapHosting, OsFamily, StandardHosting
from fxpanel.runtime.bootstrap import (
    EnvironmentResolver,
    get_environment,
    is_bootstrapped,
    publish_environment,
)
from fxpanel.runtime.hosting import DescriptorDeletionPolicy

DEV_ENV = {
    "TXDEV_ENABLED": "true",
    "TXDEV_SRC_PATH": "/home/dev/fxpanel",
    "TXDEV_VITE_URL": "http://localhost:40122",
}


def _resolver(host, registry, environ=None, system_name="Linux", **kwargs):
    return EnvironmentResolver(
        host,
        environ=environ or {},
        system_name=system_name,
        address_registry=registry,
        **kwargs,
    )


class TestResolve:
    """Tests for EnvironmentResolver.resolve"""

    def test_standard_snapshot(self, make_host, registry, data_root):
        outcome = _resolver(make_host(serverProfile="main"), registry).resolve()

        assert outcome.ok is True
        snapshot = outcome.snapshot
        assert snapshot.platform.os_family is OsFamily.LINUX
        assert snapshot.version.build_number == 7290
        assert snapshot.tool_version == "8.0.1"
        assert snapshot.paths.data_root_path == str(data_root)
        assert snapshot.paths.profile_root_path == f"{data_root}/main"
        assert isinstance(snapshot.hosting_mode, StandardHosting)
        assert snapshot.admin_port == 40120
        assert snapshot.forced_interface is None
        assert snapshot.dev_env.enabled is False

    def test_snapshot_is_frozen(self, make_host, registry):
        snapshot = _resolver(make_host(), registry).resolve().snapshot
        with pytest.raises(dataclasses.FrozenInstanceError):
            snapshot.admin_port = 1
        with pytest.raises(dataclasses.FrozenInstanceError):
            snapshot.paths.profile_name = "other"

    def test_unsupported_os(self, make_host, registry):
        outcome = _resolver(make_host(), registry, system_name="Darwin").resolve()
        assert outcome.snapshot is None
        assert outcome.fatal.code == ExitCode.UNSUPPORTED_OS

    def test_old_host_version(self, make_host, registry):
        host = make_host(version="FXServer-master SERVER v1.0.0.5000 linux")
        assert _resolver(host, registry).resolve().fatal.code == ExitCode.HOST_VERSION_TOO_OLD

    def test_missing_citizen_root(self, make_host, registry):
        outcome = _resolver(make_host(citizen_root=None), registry).resolve()
        assert outcome.fatal.code == ExitCode.ROOT_PATH_UNSET

    def test_winrar_path_on_windows(self, make_host, registry):
        host = make_host(citizen_root="C:/Users/me/AppData/Local/Temp/Rar$EXa12.3/server")
        outcome = _resolver(host, registry, system_name="Windows").resolve()
        assert outcome.fatal.code == ExitCode.EXTRACTED_ARCHIVE_PATH

    def test_non_ascii_data_path(self, make_host, registry):
        outcome = _resolver(make_host(txDataPath="/srv/données"), registry).resolve()
        assert outcome.fatal.code == ExitCode.NON_ASCII_PATH

    def test_profile_base(self, make_host, registry):
        outcome = _resolver(make_host(serverProfile="server.base"), registry).resolve()
        assert outcome.fatal.code == ExitCode.PROFILE_IS_DEPLOY_BASE

    def test_partial_dev_env(self, make_host, registry):
        environ = {"TXDEV_ENABLED": "true", "TXDEV_SRC_PATH": "/src"}
        outcome = _resolver(make_host(), registry, environ=environ).resolve()
        assert outcome.fatal.code == ExitCode.DEV_ENV_INCOMPLETE

    def test_malformed_port(self, make_host, registry):
        outcome = _resolver(make_host(txAdminPort="port"), registry).resolve()
        assert outcome.fatal.code == ExitCode.ADMIN_PORT_INVALID

    def test_warnings_collected(self, make_host, registry):
        host = make_host(version="FXServer-canary SERVER v1.0.0.7290 linux")
        outcome = _resolver(host, registry).resolve()
        assert outcome.ok is True
        assert outcome.warnings == ("You are running a custom branch of FXServer: canary",)

    def test_forced_interface_registered(self, make_host, registry):
        host = make_host(txAdminInterface="192.168.50.2")
        snapshot = _resolver(host, registry).resolve().snapshot
        assert snapshot.forced_interface == "192.168.50.2"
        assert "192.168.50.2" in registry.registered

    def test_no_interface_nothing_registered(self, make_host, registry):
        _resolver(make_host(), registry).resolve()
        assert registry.registered == frozenset()

    def test_zap_hosting(self, make_host, registry, write_zap, zap_payload):
        path = write_zap(zap_payload)
        snapshot = _resolver(make_host(txAdminPort="1"), registry).resolve().snapshot

        assert isinstance(snapshot.hosting_mode, ManagedZapHosting)
        assert snapshot.is_zap_hosting is True
        assert snapshot.admin_port == 40500
        assert snapshot.forced_fxserver_port == 30120
        assert snapshot.default_master_account.name == "john"
        assert "10.0.0.5" in registry.registered
        assert not path.exists()

    def test_zap_descriptor_kept_in_dev_mode(self, make_host, registry, write_zap, zap_payload):
        path = write_zap(zap_payload)
        snapshot = _resolver(make_host(), registry, environ=DEV_ENV).resolve().snapshot
        assert isinstance(snapshot.dev_env, DevEnabled)
        assert path.exists()

    def test_deletion_policy_injected(self, make_host, registry, write_zap, zap_payload):
        path = write_zap(zap_payload)
        _resolver(make_host(), registry, deletion_policy=DescriptorDeletionPolicy.NEVER).resolve()
        assert path.exists()

    def test_to_dict_hides_password_hash(self, make_host, registry, write_zap, zap_payload):
        write_zap(zap_payload)
        data = _resolver(make_host(), registry).resolve().snapshot.to_dict()
        assert data["hostingMode"] == "zap"
        assert data["defaultMasterAccount"] == "john"
        assert "$2y$" not in str(data)


class TestBootstrap:
    """Tests for EnvironmentResolver.bootstrap"""

    def test_publishes_snapshot(self, make_host, registry):
        assert is_bootstrapped() is False
        snapshot = _resolver(make_host(), registry).bootstrap()
        assert is_bootstrapped() is True
        assert get_environment() is snapshot

    def test_publish_only_once(self, make_host, registry):
        snapshot = _resolver(make_host(), registry).bootstrap()
        with pytest.raises(RuntimeError):
            publish_environment(snapshot)

    def test_get_before_bootstrap(self):
        with pytest.raises(RuntimeError):
            get_environment()

    def test_fatal_exits_with_code(self, make_host, registry, caplog):
        exit_codes = []
        resolver = _resolver(make_host(txAdminInterface="localhost"), registry)

        with caplog.at_level(logging.ERROR, logger="fxpanel.runtime.bootstrap"):
            with pytest.raises(SystemExit) as exc_info:
                resolver.bootstrap(exit_fn=exit_codes.append)

        assert exit_codes == [ExitCode.ADMIN_INTERFACE_INVALID]
        assert exc_info.value.code == 111
        assert "txAdminInterface is not valid." in caplog.text
        assert is_bootstrapped() is False

    def test_default_exit_is_sys_exit(self, make_host, registry):
        with pytest.raises(SystemExit) as exc_info:
            _resolver(make_host(serverProfile="!!!"), registry).bootstrap()
        assert exc_info.value.code == ExitCode.PROFILE_NAME_INVALID
