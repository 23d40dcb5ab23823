"""
Pytest configuration and shared fixtures for fxpanel tests.
"""
import json

import pytest

from fxpanel.domain.models import OsFamily, PlatformFacts
from fxpanel.runtime import bootstrap as bootstrap_module
from fxpanel.runtime.host import MappingHost
from fxpanel.runtime.local_address import LocalAddressRegistry


VALID_VERSION = "FXServer-master SERVER v1.0.0.7290 linux"


@pytest.fixture(autouse=True)
def reset_published_environment(monkeypatch):
    """Every test starts without a published snapshot"""
    monkeypatch.setattr(bootstrap_module, "_environment", None)


@pytest.fixture
def linux():
    return PlatformFacts(os_family=OsFamily.LINUX, is_windows=False)


@pytest.fixture
def windows():
    return PlatformFacts(os_family=OsFamily.WINDOWS, is_windows=True)


@pytest.fixture
def data_root(tmp_path):
    path = tmp_path / "txData"
    path.mkdir()
    return path


@pytest.fixture
def make_host(tmp_path, data_root):
    """Factory for a host with a valid baseline set of convars"""
    def _make(**convars):
        base = {
            "version": VALID_VERSION,
            "citizen_root": str(tmp_path / "server" / "alpine" / "opt" / "cfx-server"),
            "txDataPath": str(data_root),
        }
        base.update(convars)
        return MappingHost(
            convars={k: v for k, v in base.items() if v is not None},
            resource_path=str(tmp_path / "server" / "resources" / "monitor"),
            resource_metadata={"version": "8.0.1"},
        )
    return _make


@pytest.fixture
def registry():
    return LocalAddressRegistry()


@pytest.fixture
def zap_payload():
    """Valid managed-hosting descriptor content"""
    return {
        "interface": "10.0.0.5",
        "fxServerPort": 30120,
        "txAdminPort": 40500,
        "loginPageLogo": "https://example.com/logo.png",
        "defaults": {
            "license": "cfxk_abc",
            "maxClients": 48,
            "mysqlHost": "localhost",
            "mysqlPort": "3306",
        },
        "customer": {
            "name": "john",
            "password_hash": "$2y$10$abcdefghijklmnopqrstuv",
        },
    }


@pytest.fixture
def write_zap(data_root):
    """Write a descriptor into the data root and return its path"""
    def _write(payload):
        path = data_root / "txAdminZapConfig.json"
        if isinstance(payload, str):
            path.write_text(payload, encoding="utf-8")
        else:
            path.write_text(json.dumps(payload), encoding="utf-8")
        return path
    return _write
