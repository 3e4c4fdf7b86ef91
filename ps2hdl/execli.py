"""Running a command-line program and relaying its output."""

from __future__ import annotations

import os
import shlex
import subprocess
from typing import Callable, Optional

READ_BUFFER_SIZE = 1024


def exec_cli(
    file_path: str,
    cmd_line: str,
    current_dir: Optional[str],
    callback: Callable[[bytes], object],
) -> int:
    """Run file_path with the arguments in cmd_line and return its exit code.

    Standard output and standard error are merged and passed to callback in
    chunks as they arrive. Raises OSError if the program cannot be started.
    """
    kwargs = {}
    if os.name == "nt":
        args = f'"{file_path}" {cmd_line}'
        kwargs["creationflags"] = getattr(subprocess, "CREATE_NO_WINDOW", 0)
    else:
        args = [file_path, *shlex.split(cmd_line)]

    with subprocess.Popen(
        args,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        cwd=current_dir,
        **kwargs,
    ) as process:
        assert process.stdout is not None
        while True:
            chunk = os.read(process.stdout.fileno(), READ_BUFFER_SIZE)
            if not chunk:
                break
            callback(chunk)
        return process.wait()