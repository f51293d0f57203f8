#!/usr/bin/env python3

import asyncio
import logging
import subprocess
from typing import Dict, List, Optional

from .errors import GitCommandError, GitNotFoundError

__all__ = [
    "run_command",
    "get_subprocess_env",
]


def get_subprocess_env() -> Optional[Dict[str, str]]:
    """
    Get the environment variables to be used for subprocess execution.
    This function can be mocked in tests to control the environment.

    Returns:
        Optional dictionary of environment variables, or None to use the current environment.
    """
    return None


async def run_command(
    cmd: List[str],
    cwd: Optional[str] = None,
    check: bool = True,
    input: Optional[str] = None,
) -> subprocess.CompletedProcess[str]:
    """
    Run a subprocess command with consistent logging asynchronously.

    The command is always executed from an argument vector; nothing is ever
    interpreted by a shell, so branch names and commit messages are passed to
    git verbatim.

    Args:
        cmd: Command to run as a list of strings
        cwd: Current working directory for the command
        check: If True, raise GitCommandError if the command returns non-zero exit code
        input: Input to pass to the subprocess's stdin

    Returns:
        CompletedProcess instance with attributes args, returncode, stdout, stderr

    Raises:
        GitCommandError: If check=True and process returns non-zero exit code
        GitNotFoundError: If the executable cannot be found

    Notes:
        Environment variables are obtained from get_subprocess_env() function.
    """
    log_cmd = " ".join(str(c) for c in cmd)
    logging.info(f"Running command: {log_cmd}")

    stdin_pipe = asyncio.subprocess.PIPE if input is not None else None
    input_bytes = input.encode() if input is not None else None

    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            cwd=cwd,
            env=get_subprocess_env(),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            stdin=stdin_pipe,
        )
    except FileNotFoundError as e:
        raise GitNotFoundError(cmd[0]) from e

    stdout_data, stderr_data = await process.communicate(input=input_bytes)

    stdout = stdout_data.decode(errors="replace") if stdout_data else ""
    stderr = stderr_data.decode(errors="replace") if stderr_data else ""
    if stdout:
        logging.debug(f"Command stdout: {stdout}")
    if stderr:
        logging.debug(f"Command stderr: {stderr}")

    returncode = 0 if process.returncode is None else process.returncode
    logging.debug(f"Command return code: {returncode}")

    result = subprocess.CompletedProcess[str](
        args=cmd,
        returncode=returncode,
        stdout=stdout,
        stderr=stderr,
    )

    if check and result.returncode != 0:
        raise GitCommandError(cmd, result.returncode, stdout, stderr)

    return result
