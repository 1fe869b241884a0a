"""Subprocess execution behind a replaceable interface."""

import logging
import shlex
import shutil
import subprocess

logger = logging.getLogger(__name__)


class CommandRunner:
    """
    Run external commands and report whether they are installed.

    All git and n8n invocations go through an instance of this class, so a
    subclass can record or replace them (tests use this to count calls
    without touching a real n8n instance).

    Example:
        runner = CommandRunner()
        if runner.available("git"):
            result = runner.run("git", "status", "--porcelain", capture=True)
    """

    def run(
        self,
        command: str,
        *args: str,
        capture: bool = False,
    ) -> subprocess.CompletedProcess:
        """
        Run a command and return the result without checking its exit status.

        Args:
            command: Executable name (e.g., "git", "n8n").
            *args: Arguments passed to the executable.
            capture: Whether to capture stdout/stderr as text (default: False,
                     output goes straight to the terminal).

        Returns:
            CompletedProcess result
        """
        cmd = [*shlex.split(command), *args]
        logger.debug("Running %s", shlex.join(cmd))

        if capture:
            return subprocess.run(cmd, capture_output=True, text=True, check=False)

        return subprocess.run(cmd, check=False)

    def available(self, command: str) -> bool:
        """
        Check if a command is available in PATH.

        Args:
            command: Executable name. Only the first word is looked up, so
                     "npx n8n" checks for npx.

        Returns:
            True if the command is installed, False otherwise.
        """
        words = shlex.split(command)
        return bool(words) and shutil.which(words[0]) is not None


default_runner = CommandRunner()
