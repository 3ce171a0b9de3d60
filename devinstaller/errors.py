"""Exception types raised while building the registry or running installs."""

from __future__ import annotations


class InstallerError(Exception):
    """Base class for failures that abort an install run."""

    exit_code = 1

    @property
    def command(self) -> str:
        return str(self)


class CommandFailure(InstallerError):
    """An external command exited with a non-zero status."""

    def __init__(self, command: str, exit_code: int, output: str = ""):
        super().__init__(f"The command '{command}' failed with code {exit_code}")
        self._command = command
        self.exit_code = exit_code
        self.output = output

    @property
    def command(self) -> str:
        return self._command


class DownloadError(InstallerError):
    """A file could not be fetched from its vendor URL."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"download {url}: {reason}")
        self.url = url
        self.reason = reason

    @property
    def command(self) -> str:
        return f"download {self.url}"


class RegistryError(InstallerError):
    """The static action table references something that cannot be resolved."""


class FileOperationError(InstallerError):
    """A file the installer manages could not be written or changed."""

    def __init__(self, path, reason: str):
        super().__init__(f"write {path}: {reason}")
        self.path = path
        self.reason = reason

    @property
    def command(self) -> str:
        return f"write {self.path}"
