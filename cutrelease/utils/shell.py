"""Safe subprocess execution utilities.

Provides shell command execution with:
- ANSI escape code stripping (prevents contamination in version strings)
- Proper error handling and reporting
- Timeout support bounded by the release deadline
- Environment variable injection
"""

import logging
import os
import re
import shlex
import shutil
import subprocess
from pathlib import Path

from cutrelease.exceptions import ReleaseTimeoutError

logger = logging.getLogger(__name__)


class ShellError(Exception):
    """Exception raised when a shell command fails.

    Attributes:
        cmd: The command that failed
        returncode: Exit code of the failed command
        stdout: Standard output (ANSI stripped)
        stderr: Standard error (ANSI stripped)
    """

    def __init__(
        self,
        cmd: str,
        returncode: int,
        stdout: str,
        stderr: str,
    ) -> None:
        self.cmd = cmd
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(f"Command failed with exit code {returncode}: {cmd}")

    def __str__(self) -> str:
        parts = [f"Command failed: {self.cmd}"]
        parts.append(f"Exit code: {self.returncode}")
        if self.stderr:
            parts.append(f"Stderr: {self.stderr}")
        if self.stdout:
            parts.append(f"Stdout: {self.stdout}")
        return "\n".join(parts)


# Matches: ESC[...m, ESC[...;...m, and other control sequences
ANSI_PATTERN = re.compile(
    r"\x1b\[[0-9;]*[a-zA-Z]|\x1b\][^\x07]*\x07|\x1b[PX^_][^\x1b]*\x1b\\"
)

CONTROL_CHARS_PATTERN = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")


def strip_ansi(text: str) -> str:
    """Remove ANSI escape sequences and control characters from text.

    Tag names and versions are parsed from command output, so colour codes
    must never leak into them.

    Args:
        text: Input text potentially containing ANSI codes

    Returns:
        Clean text with all ANSI sequences removed
    """
    if not text:
        return ""
    result = ANSI_PATTERN.sub("", text)
    result = CONTROL_CHARS_PATTERN.sub("", result)
    return result


def run(
    cmd: str | list[str],
    cwd: Path | None = None,
    capture: bool = True,
    check: bool = True,
    timeout: float = 300,
    env: dict[str, str] | None = None,
    strip_output: bool = True,
    input_text: str | None = None,
) -> subprocess.CompletedProcess[str]:
    """Execute a command safely.

    Always uses shell=False. Environment values are never logged, since they
    may carry access tokens.

    Args:
        cmd: Command to execute (string or list of arguments)
        cwd: Working directory for the command
        capture: Whether to capture stdout/stderr
        check: Whether to raise ShellError on non-zero exit
        timeout: Maximum execution time in seconds
        env: Additional environment variables
        strip_output: Whether to strip ANSI codes from output
        input_text: Text passed to the command's stdin

    Returns:
        CompletedProcess with stdout/stderr (ANSI stripped if requested)

    Raises:
        ShellError: If command fails and check=True
        ReleaseTimeoutError: If command exceeds timeout
    """
    cmd_list = shlex.split(cmd) if isinstance(cmd, str) else list(cmd)
    cmd_str = " ".join(cmd_list)

    merged_env = {**os.environ}
    if env:
        merged_env.update(env)

    logger.debug("Running: %s (cwd=%s, timeout=%.0fs)", cmd_str, cwd or ".", timeout)

    try:
        result = subprocess.run(
            cmd_list,
            cwd=cwd,
            capture_output=capture,
            text=True,
            timeout=timeout,
            env=merged_env,
            input=input_text,
        )
    except subprocess.TimeoutExpired as e:
        raise ReleaseTimeoutError(
            f"Command timed out after {timeout:.0f}s",
            details=cmd_str,
            fix_hint="Re-run the command; completed steps are safe to repeat",
        ) from e
    except FileNotFoundError as e:
        raise ShellError(cmd=cmd_str, returncode=127, stdout="", stderr=str(e)) from e

    if capture and strip_output:
        result.stdout = strip_ansi(result.stdout) if result.stdout else ""
        result.stderr = strip_ansi(result.stderr) if result.stderr else ""

    if check and result.returncode != 0:
        raise ShellError(
            cmd=cmd_str,
            returncode=result.returncode,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
        )

    return result


def is_command_available(cmd: str) -> bool:
    """Check if a command is available in PATH."""
    return shutil.which(cmd) is not None
