"""Tests for the CLI commands."""

import os
import tempfile
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from syncth import main as cli
from syncth.core.client import RemoteWriteError
from syncth.core.sharing import ShareResult
from syncth.models.remote import FileInfo, FolderType

CONFIG_XML = """<configuration version="37">
    <folder id="abc12-xyz34" label="Documents" path="/home/me/Documents">
        <device id="DEV1"></device>
        <device id="SELF"></device>
    </folder>
    <device id="SELF" name="desktop"></device>
    <device id="DEV1" name="laptop"></device>
    <gui><apikey>test-key</apikey></gui>
</configuration>
"""


@pytest.fixture
def config_path():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "config.xml"
        path.write_text(CONFIG_XML)
        with patch.dict(os.environ, {}, clear=True):
            yield path


@pytest.fixture
def client():
    mock_client = MagicMock()
    mock_client.get_own_id.return_value = "SELF"
    mock_client.auth.base_url = "http://localhost:8384"
    with patch.object(cli.SyncthingClient, "from_config", return_value=mock_client):
        yield mock_client


class TestShareCommands:
    """Tests for share and unshare."""

    def test_share_resolves_labels(self, config_path: Path, client: MagicMock) -> None:
        with patch.object(cli, "FolderSharing") as sharing_cls:
            sharing_cls.return_value.share.return_value = ShareResult(
                "abc12-xyz34", "DEV1", "share", 1, 2
            )
            code = cli.main(["--config", str(config_path), "share", "-f", "Documents", "-d", "laptop"])

        assert code == 0
        sharing_cls.assert_called_once_with(client, strict=False)
        sharing_cls.return_value.share.assert_called_once_with("abc12-xyz34", "DEV1")

    def test_share_strict_flag(self, config_path: Path, client: MagicMock) -> None:
        with patch.object(cli, "FolderSharing") as sharing_cls:
            sharing_cls.return_value.share.return_value = ShareResult(
                "abc12-xyz34", "DEV1", "share", 2, 2
            )
            cli.main(["--config", str(config_path), "share", "--folder", "Documents",
                      "--device", "laptop", "--strict"])

        sharing_cls.assert_called_once_with(client, strict=True)

    def test_unshare(self, config_path: Path, client: MagicMock) -> None:
        with patch.object(cli, "FolderSharing") as sharing_cls:
            sharing_cls.return_value.unshare.return_value = ShareResult(
                "abc12-xyz34", "DEV1", "unshare", 2, 1
            )
            code = cli.main(["--config", str(config_path), "unshare", "-f", "Documents", "-d", "laptop"])

        assert code == 0
        sharing_cls.return_value.unshare.assert_called_once_with("abc12-xyz34", "DEV1")

    def test_unknown_folder_label(self, config_path: Path, client: MagicMock) -> None:
        with patch.object(cli, "FolderSharing") as sharing_cls:
            code = cli.main(["--config", str(config_path), "share", "-f", "Music", "-d", "laptop"])

        assert code == 1
        sharing_cls.assert_not_called()

    def test_unknown_device_label(self, config_path: Path, client: MagicMock) -> None:
        with patch.object(cli, "FolderSharing") as sharing_cls:
            code = cli.main(["--config", str(config_path), "unshare", "-f", "Documents", "-d", "tablet"])

        assert code == 1
        sharing_cls.assert_not_called()

    def test_remote_error_exits_nonzero(self, config_path: Path, client: MagicMock) -> None:
        with patch.object(cli, "FolderSharing") as sharing_cls:
            sharing_cls.return_value.share.side_effect = RemoteWriteError("API error 500", 500)
            code = cli.main(["--config", str(config_path), "share", "-f", "Documents", "-d", "laptop"])

        assert code == 1


class TestOtherCommands:
    """Tests for list, add, browse, status and connect-folder."""

    def test_list_fetches_own_id_once(self, config_path: Path, client: MagicMock) -> None:
        code = cli.main(["--config", str(config_path), "list"])

        assert code == 0
        client.get_own_id.assert_called_once_with()

    def test_add_directory(self, config_path: Path, client: MagicMock) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            target = Path(tmpdir) / "Music"
            target.mkdir()
            with patch.object(cli, "generate_folder_id", return_value="aaaaa-bbbbb"):
                code = cli.main(["--config", str(config_path), "add", str(target), "-t", "receiveonly"])

            assert code == 0
            client.add_folder.assert_called_once_with(
                str(target.resolve()), "aaaaa-bbbbb", FolderType.RECEIVE_ONLY, "Music"
            )

    def test_add_default_type(self, config_path: Path, client: MagicMock) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            cli.main(["--config", str(config_path), "add", tmpdir])

        assert client.add_folder.call_args.args[2] == FolderType.SEND_ONLY

    def test_add_missing_path(self, config_path: Path, client: MagicMock) -> None:
        code = cli.main(["--config", str(config_path), "add", "/nonexistent/dir"])

        assert code == 1
        client.add_folder.assert_not_called()

    def test_browse(self, config_path: Path, client: MagicMock) -> None:
        client.browse.return_value = [
            FileInfo("sub", "2024-01-01", 0, "directory", [FileInfo("a.txt", "2024-01-01", 3, "file")]),
        ]

        code = cli.main(["--config", str(config_path), "browse", "-f", "Documents"])

        assert code == 0
        client.browse.assert_called_once_with("abc12-xyz34")

    def test_status(self, config_path: Path, client: MagicMock) -> None:
        assert cli.main(["--config", str(config_path), "status"]) == 0

    def test_connect_folder_not_implemented(self, config_path: Path, client: MagicMock) -> None:
        assert cli.main(["--config", str(config_path), "connect-folder"]) == 1

    def test_missing_config(self, client: MagicMock) -> None:
        with patch.dict(os.environ, {}, clear=True):
            code = cli.main(["--config", "/nonexistent/config.xml", "list"])

        assert code == 1
        client.get_own_id.assert_not_called()

    def test_no_command(self) -> None:
        assert cli.main([]) == 1

    def test_add_unique_checks_existing_ids(self, config_path: Path, client: MagicMock) -> None:
        client.list_folder_ids.return_value = {"abc12-xyz34"}

        with tempfile.TemporaryDirectory() as tmpdir:
            with patch.object(cli, "generate_folder_id", return_value="aaaaa-bbbbb") as gen:
                cli.main(["--config", str(config_path), "add", tmpdir, "--unique"])

        gen.assert_called_once_with({"abc12-xyz34"})

    def test_add_filesystem_root(self, config_path: Path, client: MagicMock) -> None:
        code = cli.main(["--config", str(config_path), "add", "/"])

        assert code == 0
        path, _, _, label = client.add_folder.call_args.args
        assert label == path == str(Path("/").resolve())


class TestConfigFailures:
    """Local config problems exit 1 before any request."""

    def test_config_parent_is_a_file(self, client: MagicMock) -> None:
        with tempfile.NamedTemporaryFile(suffix=".xml") as f:
            with patch.dict(os.environ, {}, clear=True):
                code = cli.main(["--config", str(Path(f.name) / "config.xml"), "list"])

        assert code == 1
        client.get_own_id.assert_not_called()

    def test_missing_api_key(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "config.xml"
            path.write_text('<configuration><folder id="a" label="A" path="/a"/></configuration>')
            with patch.dict(os.environ, {}, clear=True):
                with patch.object(cli.SyncthingClient, "get_own_id") as get_own_id:
                    code = cli.main(["--config", str(path), "list"])

        assert code == 1
        get_own_id.assert_not_called()

    def test_unrelated_value_error_is_not_swallowed(self, config_path: Path, client: MagicMock) -> None:
        client.get_own_id.side_effect = ValueError("bug")

        with pytest.raises(ValueError, match="bug"):
            cli.main(["--config", str(config_path), "list"])
