"""Boot scriptlet support.

The ``scriptlet`` setting holds a small shell script on a single line.
Lines are separated by the two-character escape ``\\n``; any other
``\\X`` stands for ``X``, and a backslash at the very end is ignored.
Only the first scriptlet found (the root scope, then its descendants
depth first) is run.
"""

import logging
import subprocess
from typing import Callable, List, Optional

from .settings import SCRIPTLET_SETTING, Lookup, SettingsStore

logger = logging.getLogger(__name__)

# Runs one line, returns its exit status
LineRunner = Callable[[str], int]


def scriptlet_lines(script: str) -> List[str]:
    """Split a scriptlet into its command lines."""
    lines: List[str] = []
    line: List[str] = []
    chars = iter(script)
    for char in chars:
        if char == "\\":
            char = next(chars, None)
            if char is None:
                break
            if char == "n":
                lines.append("".join(line))
                line = []
                continue
        line.append(char)
    lines.append("".join(line))
    return lines


def find_scriptlet(store: SettingsStore) -> Optional[str]:
    """Return the first scriptlet set anywhere in the tree, if any."""
    return store.fetch_effective(store.tree.root, SCRIPTLET_SETTING, Lookup.INHERIT)


def _run_shell(line: str) -> int:
    return subprocess.run(line, shell=True).returncode


def exec_scriptlet(store: SettingsStore, runner: Optional[LineRunner] = None) -> List[int]:
    """Run each line of the scriptlet.

    Args:
        store: Store to read the scriptlet from.
        runner: Runs one line; defaults to the system shell.

    Returns:
        Exit status of each line, in order. Empty if no scriptlet is set.
    """
    script = find_scriptlet(store)
    if not script:
        logger.debug("No scriptlet")
        return []

    runner = runner or _run_shell
    statuses = []
    for line in scriptlet_lines(script):
        logger.debug(f"> {line}")
        status = runner(line)
        if status != 0:
            logger.warning(f"Scriptlet line exited with status {status}: {line}")
        statuses.append(status)
    return statuses
