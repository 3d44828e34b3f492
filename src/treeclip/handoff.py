"""
Hand the finished output file to the clipboard or an editor.
"""

from __future__ import annotations

import os
import shlex
import subprocess
import sys
from pathlib import Path
from typing import List, Optional

import pyperclip
from colorama import Fore

from .core import OutputError, TreeclipError, _log


class ClipboardError(TreeclipError): ...
class EditorError(TreeclipError): ...


def copy_to_clipboard(path: Path) -> int:
    """Put the text of *path* on the system clipboard; return its length."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ClipboardError(f"Could not read '{path}': {e}") from e
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException as e:
        raise ClipboardError(f"Could not set clipboard contents: {e}") from e
    return len(text)


def platform_open_command() -> Optional[List[str]]:
    if sys.platform == "darwin":
        return ["open"]
    if os.name == "posix":
        return ["xdg-open"]
    return None


def _open_with_platform(path: Path) -> bool:
    if sys.platform == "win32":
        try:
            os.startfile(path)  # type: ignore[attr-defined]
            return True
        except OSError as e:
            _log(f"! Could not open {path} with the default editor: {e}", Fore.YELLOW, file=sys.stderr)
            return False

    cmd = platform_open_command()
    if cmd is None:
        return False
    try:
        status = subprocess.run([*cmd, str(path)], check=False).returncode
    except OSError as e:
        _log(f"! Could not run {cmd[0]}: {e}", Fore.YELLOW, file=sys.stderr)
        return False
    return status == 0


def open_in_editor(path: Path) -> None:
    """Open *path* with the desktop default, falling back to ``$EDITOR``."""
    path = Path(path)
    if not path.exists():
        raise EditorError(f"File does not exist: {path}")
    path = path.resolve()

    if _open_with_platform(path):
        return

    _log("Default editor failed, trying $EDITOR …", Fore.YELLOW, file=sys.stderr)
    editor = shlex.split(os.environ.get("EDITOR", "")) or ["nano"]
    try:
        status = subprocess.run([*editor, str(path)], check=False).returncode
    except OSError as e:
        raise EditorError(f"Could not start editor '{editor[0]}': {e}") from e
    if status != 0:
        raise EditorError(f"Editor '{editor[0]}' exited with status {status}")


def delete_output(path: Path) -> None:
    try:
        Path(path).unlink()
    except OSError as e:
        raise OutputError(f"Could not delete '{path}': {e}") from e
