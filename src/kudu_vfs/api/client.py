"""Kudu VFS client — one method per remote operation."""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Any

from kudu_vfs.api.dispatcher import (
    NO_PAYLOAD,
    FileDownload,
    FileUpload,
    JsonBody,
    NoPayload,
    RequestShape,
    dispatch,
)
from kudu_vfs.auth import make_token
from kudu_vfs.vfs.models import CommandResult, VfsEntry
from kudu_vfs.vfs.paths import file_path, folder_path

if TYPE_CHECKING:
    from kudu_vfs.config import KuduConfig

logger = logging.getLogger(__name__)

DEFAULT_COMMAND_DIR = "D:\\home"

ENDPOINT_ENVIRONMENT = "environment"
ENDPOINT_COMMAND = "command"
ENDPOINT_VFS = "vfs"
ENDPOINT_ZIP = "zip"

LocalPath = str | os.PathLike[str]


class KuduClient:
    """Authenticated client for the Kudu API of a single App Service site.

    Holds only the site name, the Basic auth token and the default command
    directory; every call issues exactly one request.
    """

    def __init__(self, site_name: str, token: str, command_dir: str = DEFAULT_COMMAND_DIR) -> None:
        """Initialise the client.

        Args:
            site_name: App Service site name.
            token: Base64 Basic auth token (see ``kudu_vfs.auth.make_token``).
            command_dir: Remote working directory used by ``run_command``
                when no directory is given.
        """
        self._site = site_name
        self._token = token
        self._command_dir = command_dir

    @property
    def site_name(self) -> str:
        return self._site

    def _dispatch(self, verb: str, endpoint: str, shape: RequestShape = NO_PAYLOAD) -> Any:
        return dispatch(self._site, self._token, verb, endpoint, shape)

    # ------------------------------------------------------------------
    # Site
    # ------------------------------------------------------------------

    def get_environment(self) -> dict[str, Any]:
        """Return the Kudu environment info (version, last modified time)."""
        return self._dispatch("GET", ENDPOINT_ENVIRONMENT)  # type: ignore[no-any-return]

    def run_command(self, command: str, dir: str | None = None) -> CommandResult:  # noqa: A002
        """Run a shell command on the remote host.

        Args:
            command: Command line text, executed by the remote shell.
            dir: Absolute working directory on the remote host (a native
                path such as ``D:\\home``, not a VFS path). Defaults to the
                client's command directory.

        Returns:
            CommandResult with the command's output, error text and exit code.
        """
        payload = {"command": command, "dir": dir if dir is not None else self._command_dir}
        logger.info("[run_command] running remote command; dir:%s", payload["dir"])
        response = self._dispatch("POST", ENDPOINT_COMMAND, JsonBody(payload))
        result = CommandResult.from_json(response or {})
        logger.info("[run_command] command finished; exit_code:%d", result.exit_code)
        return result

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------

    def download_file(self, path: str, out_file: LocalPath | None = None) -> bytes | None:
        """Read a remote file.

        Args:
            path: Remote file path.
            out_file: Local path to stream the content into. When omitted the
                content is returned in memory.

        Returns:
            File content as bytes, or None when streamed to ``out_file``.
        """
        endpoint = f"{ENDPOINT_VFS}{file_path(path)}"
        if out_file is None:
            content: bytes = self._dispatch("GET", endpoint, NoPayload(decode_json=False))
            return content
        self._dispatch("GET", endpoint, FileDownload(out_file))
        logger.info("[download_file] downloaded file; path:%s;out_file:%s", endpoint, out_file)
        return None

    def upload_file(self, path: str, in_file: LocalPath) -> None:
        """Write a local file to a remote path, replacing any existing file."""
        endpoint = f"{ENDPOINT_VFS}{file_path(path)}"
        self._dispatch("PUT", endpoint, FileUpload(in_file))
        logger.info("[upload_file] uploaded file; path:%s;in_file:%s", endpoint, in_file)

    def delete_file(self, path: str) -> None:
        endpoint = f"{ENDPOINT_VFS}{file_path(path)}"
        self._dispatch("DELETE", endpoint)
        logger.info("[delete_file] deleted file; path:%s", endpoint)

    # ------------------------------------------------------------------
    # Folders
    # ------------------------------------------------------------------

    def list_folder(self, path: str = "") -> list[VfsEntry]:
        """List the children of a remote folder.

        Args:
            path: Remote folder path; empty means the VFS root.

        Returns:
            One VfsEntry per file or sub-folder.
        """
        endpoint = f"{ENDPOINT_VFS}{folder_path(path)}"
        response = self._dispatch("GET", endpoint)
        entries = [VfsEntry.from_json(raw) for raw in response or []]
        logger.info("[list_folder] listed folder; path:%s;entry_count:%d", endpoint, len(entries))
        return entries

    def create_folder(self, path: str) -> None:
        endpoint = f"{ENDPOINT_VFS}{folder_path(path)}"
        self._dispatch("PUT", endpoint)
        logger.info("[create_folder] created folder; path:%s", endpoint)

    def delete_folder(self, path: str) -> None:
        """Delete a remote folder. Kudu rejects the request if the folder is not empty."""
        endpoint = f"{ENDPOINT_VFS}{folder_path(path)}"
        self._dispatch("DELETE", endpoint)
        logger.info("[delete_folder] deleted folder; path:%s", endpoint)

    # ------------------------------------------------------------------
    # Zip archives
    # ------------------------------------------------------------------

    def download_zip(self, path: str, out_file: LocalPath) -> None:
        """Download a remote folder as a zip archive into ``out_file``."""
        endpoint = f"{ENDPOINT_ZIP}{folder_path(path)}"
        self._dispatch("GET", endpoint, FileDownload(out_file))
        logger.info("[download_zip] downloaded archive; path:%s;out_file:%s", endpoint, out_file)

    def upload_zip(self, path: str, in_file: LocalPath) -> None:
        """Upload a local zip archive and extract it into a remote folder."""
        endpoint = f"{ENDPOINT_ZIP}{folder_path(path)}"
        self._dispatch("PUT", endpoint, FileUpload(in_file))
        logger.info("[upload_zip] uploaded archive; path:%s;in_file:%s", endpoint, in_file)


def kudu_client_from_config(config: KuduConfig) -> KuduClient:
    """Construct a KuduClient from application configuration.

    Args:
        config: Application configuration instance.

    Returns:
        Configured KuduClient instance.
    """
    return KuduClient(
        site_name=config.site_name,
        token=make_token(config.username, config.password),
        command_dir=config.command_dir,
    )
