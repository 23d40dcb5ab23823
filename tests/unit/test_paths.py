"""
Unit tests for path resolution.

Tests focus on:
- Separator normalization
- ASCII-only enforcement
- Profile name sanitization
- WinRAR temp folder guard
- Data root defaults per OS
"""
import pytest

from fxpanel.domain.exceptions import ExitCode
from fxpanel.runtime.host import MappingHost
from fxpanel.runtime.paths import (
    check_archive_temp_folder,
    check_ascii_paths,
    clean_path,
    resolve_data_root,
    resolve_host_root,
    resolve_paths,
    resolve_resource,
    sanitize_profile_name,
)


class TestCleanPath:
    """Tests for clean_path"""

    def test_collapses_parent_segments(self):
        assert clean_path("/opt/fx/server/../txData") == "/opt/fx/txData"

    def test_uses_forward_slashes(self):
        assert "\\" not in clean_path("C:\\fxserver\\txData")


class TestProfileName:
    """Tests for sanitize_profile_name"""

    def test_default_accepted(self):
        result = sanitize_profile_name("default")
        assert result.ok is True
        assert result.value == "default"

    def test_empty_rejected(self):
        result = sanitize_profile_name("")
        assert result.fatal.code == ExitCode.PROFILE_NAME_INVALID

    def test_only_invalid_characters_rejected(self):
        result = sanitize_profile_name("  !!! ")
        assert result.fatal.code == ExitCode.PROFILE_NAME_INVALID

    def test_deploy_base_rejected(self):
        result = sanitize_profile_name("myserver.base")
        assert result.fatal.code == ExitCode.PROFILE_IS_DEPLOY_BASE
        assert "myserver.base" in result.fatal.message

    def test_strips_disallowed_characters(self):
        """Case is kept, spaces and punctuation outside the allow-list are dropped"""
        result = sanitize_profile_name("My Server!")
        assert result.ok is True
        assert result.value == "MyServer"

    def test_keeps_allowed_punctuation(self):
        assert sanitize_profile_name("srv_01.test-a").value == "srv_01.test-a"

    def test_none_uses_default(self):
        assert sanitize_profile_name(None).value == "default"


class TestAsciiPaths:
    """Tests for check_ascii_paths"""

    @pytest.mark.parametrize("path", ["/srv/über/txData", "/srv/ρέθ", "C:/Users/警告/fx"])
    def test_non_ascii_rejected(self, path):
        result = check_ascii_paths("/opt/fx", path, 7290)
        assert result.fatal.code == ExitCode.NON_ASCII_PATH
        assert any("C:/fivemserver/7290/" in line for line in result.fatal.details)

    def test_non_ascii_host_root_rejected(self):
        result = check_ascii_paths("/opt/çâýå", "/opt/txData", 7290)
        assert result.fatal.code == ExitCode.NON_ASCII_PATH

    def test_first_non_ascii_code_point_rejected(self):
        result = check_ascii_paths("/opt/fx", "/srv/a\x80b", 7290)
        assert result.fatal.code == ExitCode.NON_ASCII_PATH

    @pytest.mark.parametrize("path", ["/opt/fx/txData", "C:/fivemserver/txData", "/a b/~c$d", "/srv/a\x7fb"])
    def test_ascii_accepted(self, path):
        assert check_ascii_paths("/opt/fx", path, 7290).ok is True


class TestArchiveGuard:
    """Tests for check_archive_temp_folder"""

    def test_winrar_temp_on_windows_rejected(self, windows):
        path = "C:/Users/me/AppData/Local/Temp/Rar$EXa1234.567/server"
        result = check_archive_temp_folder(path, windows)
        assert result.fatal.code == ExitCode.EXTRACTED_ARCHIVE_PATH

    def test_case_insensitive(self, windows):
        result = check_archive_temp_folder("C:/temp//rar$dia/server", windows)
        assert result.fatal.code == ExitCode.EXTRACTED_ARCHIVE_PATH

    def test_only_checked_on_windows(self, linux):
        result = check_archive_temp_folder("/tmp/Temp/Rar$EX/server", linux)
        assert result.ok is True


class TestRoots:
    """Tests for host root, resource and data root discovery"""

    def test_missing_citizen_root(self):
        result = resolve_host_root(MappingHost())
        assert result.fatal.code == ExitCode.ROOT_PATH_UNSET

    def test_citizen_root_false_means_unset(self):
        result = resolve_host_root(MappingHost(convars={"citizen_root": "false"}))
        assert result.fatal.code == ExitCode.ROOT_PATH_UNSET

    def test_resource_version_missing(self):
        host = MappingHost(resource_path="/opt/monitor")
        assert resolve_resource(host).fatal.code == ExitCode.TOOL_VERSION_INVALID

    def test_resource_path_missing(self):
        host = MappingHost(resource_metadata={"version": "8.0.1"})
        assert resolve_resource(host).fatal.code == ExitCode.RESOURCE_PATH_UNRESOLVED

    def test_resource_resolved(self):
        host = MappingHost(resource_path="/opt/res/./monitor", resource_metadata={"version": "8.0.1"})
        assert resolve_resource(host).value == ("8.0.1", "/opt/res/monitor")

    def test_linux_default_data_root(self, linux):
        data_root = resolve_data_root(MappingHost(), "/home/fx/server/alpine/opt/cfx-server", linux)
        assert data_root == "/home/fx/server/txData"

    def test_windows_default_data_root(self, windows):
        data_root = resolve_data_root(MappingHost(), "C:/fxserver/artifacts", windows)
        assert data_root == "C:/fxserver/txData"

    def test_data_path_convar_wins(self, linux):
        host = MappingHost(convars={"txDataPath": "/srv/data/"})
        assert resolve_data_root(host, "/opt/fx", linux) == "/srv/data"


class TestResolvePaths:
    """Tests for resolve_paths"""

    def test_profile_root_is_joined(self, linux):
        host = MappingHost(convars={"txDataPath": "/srv/txData", "serverProfile": "main"})
        result = resolve_paths(host, "/opt/fx", linux, 7290)
        assert result.ok is True
        paths = result.value
        assert paths.data_root_path == "/srv/txData"
        assert paths.profile_name == "main"
        assert paths.profile_root_path == "/srv/txData/main"

    def test_default_profile(self, linux):
        host = MappingHost(convars={"txDataPath": "/srv/txData"})
        assert resolve_paths(host, "/opt/fx", linux, 7290).value.profile_name == "default"

    def test_non_ascii_checked_before_profile(self, linux):
        host = MappingHost(convars={"txDataPath": "/srv/dados/ação", "serverProfile": ""})
        result = resolve_paths(host, "/opt/fx", linux, 7290)
        assert result.fatal.code == ExitCode.NON_ASCII_PATH
