"""
Core logic for treeclip package.

Pipeline: build an :class:`ExcludeMatcher` once from the root, let
:func:`walk` lazily yield every surviving file under the input path, and let
:func:`aggregate` write them into one output file as ``==> rel/path`` records.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from pathspec.patterns import GitWildMatchPattern
from colorama import Fore, Style

from . import DEFAULT_OUTPUT_NAME, IGNORE_FILENAME

PathLike = Union[str, os.PathLike]


# Exceptions
class TreeclipError(Exception): ...
class InputPathNotFound(TreeclipError): ...
class PatternSyntaxError(TreeclipError): ...
class ConfigFileError(TreeclipError): ...
class OutputError(TreeclipError): ...
class OutputOpenError(OutputError): ...
class OutputWriteError(OutputError): ...
class ContentReadError(TreeclipError): ...
class EntryAccessError(TreeclipError): ...


# Defaults, applied before the ignore file so they can be re-included with "!"
DEFAULT_PATTERNS: List[str] = [
    f"/{IGNORE_FILENAME}",  # exclude the ignore file itself
]


def _log(msg: str, color: Optional[str] = None, file=None) -> None:
    msg = f"[treeclip] {msg}"
    if color:
        msg = color + msg + Style.RESET_ALL
    print(msg, file=file or sys.stdout)


# Ignore-file utilities
def load_ignore_file(root: Path, verbose: bool = False) -> List[str]:
    """Return the raw lines of ``<root>/.treeclipignore`` (empty if absent)."""
    ignore_path = root / IGNORE_FILENAME
    if not ignore_path.is_file():
        return []
    try:
        with ignore_path.open("r", encoding="utf-8") as fh:
            lines = [ln.rstrip("\r\n") for ln in fh]
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigFileError(f"Could not read ignore file '{ignore_path}': {e}") from e
    if verbose:
        _log(f"Found ignore file {ignore_path}, applying its rules", Fore.CYAN)
    return lines


def load_extra_patterns(config_path: Path) -> List[str]:
    if not config_path.exists():
        raise ConfigFileError(f"Config file '{config_path}' does not exist")
    if not config_path.is_file():
        raise ConfigFileError(f"'{config_path}' is not a file")
    try:
        with config_path.open("r", encoding="utf-8") as fh:
            return [
                ln.strip()
                for ln in fh
                if ln.strip() and not ln.lstrip().startswith("#")
            ]
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigFileError(f"Could not read config file '{config_path}': {e}") from e


class ExcludeMatcher:
    """Decides whether a path is excluded by the compiled gitignore rules.

    Rules are evaluated with gitignore precedence: the last rule matching a
    path decides, ``!`` rules re-include, and rules ending in ``/`` only match
    directories. A rule like ``dir/**`` matches what is inside ``dir`` but not
    ``dir`` itself. Relative paths are taken relative to :attr:`root`.
    """

    def __init__(self, root: Path, rules: Sequence[Tuple[GitWildMatchPattern, bool]], patterns: Sequence[str]):
        self.root = root
        self.rules = tuple(rules)
        self.patterns = tuple(patterns)

    def __repr__(self) -> str:
        return f"ExcludeMatcher(root={str(self.root)!r}, patterns={len(self.patterns)})"

    def _relative(self, path: Path, base: Optional[Path]) -> str:
        try:
            return path.relative_to(self.root).as_posix()
        except ValueError:
            pass
        # outside root: match against the walk top, or just the entry name
        if base is not None:
            try:
                return path.relative_to(base).as_posix()
            except ValueError:
                pass
        return path.name

    def is_excluded(
        self,
        path: PathLike,
        is_dir: Optional[bool] = None,
        base: Optional[PathLike] = None,
    ) -> bool:
        path = Path(path)
        if not path.is_absolute():
            path = self.root / path
        rel = self._relative(path, Path(base) if base is not None else None)
        if rel in ("", "."):
            return False
        if is_dir is None:
            is_dir = path.is_dir()

        excluded = False
        for pattern, dir_only in self.rules:
            if dir_only and not is_dir:
                continue
            candidate = rel + "/" if dir_only else rel
            if pattern.regex.match(candidate):
                excluded = pattern.include
        return excluded


def compile_patterns(lines: Sequence[str]) -> List[Tuple[GitWildMatchPattern, bool]]:
    """Compile gitignore *lines*, flagging the directory-only (``dir/``) ones."""
    rules = []
    for line in lines:
        try:
            pattern = GitWildMatchPattern(line)
        except ValueError as e:
            raise PatternSyntaxError(f"Invalid exclusion pattern: {e}") from e
        if pattern.include is None:
            continue
        rules.append((pattern, line.strip().endswith("/")))
    return rules


def build_matcher(
    root: PathLike,
    patterns: Sequence[str] = (),
    extra_patterns_file: Optional[PathLike] = None,
    verbose: bool = False,
) -> ExcludeMatcher:
    """Compile ignore-file rules, then config-file rules, then *patterns*."""
    root = Path(root).resolve()
    lines = list(DEFAULT_PATTERNS)
    lines.extend(load_ignore_file(root, verbose=verbose))
    if extra_patterns_file is not None:
        lines.extend(load_extra_patterns(Path(extra_patterns_file).resolve()))
        if verbose:
            _log(f"Loaded extra patterns from {extra_patterns_file}")
    lines.extend(patterns)
    return ExcludeMatcher(root, compile_patterns(lines), lines)


# Traversal
def is_hidden(path: PathLike, verbose: bool = False) -> bool:
    hidden = Path(path).name.startswith(".")
    if hidden and verbose:
        _log(f"Hidden entry '{path}' was skipped", Fore.YELLOW)
    return hidden


def validate_input_path(input_path: PathLike) -> Path:
    try:
        resolved = Path(input_path).resolve()
    except (OSError, RuntimeError) as e:
        raise InputPathNotFound(f"Could not resolve input path '{input_path}': {e}") from e
    if not resolved.exists():
        raise InputPathNotFound(f"Path does not exist: {input_path}")
    return resolved


def _same_file(path: Path, target: Optional[Path]) -> bool:
    if target is None:
        return False
    try:
        return path.resolve() == target
    except (OSError, RuntimeError):
        # unresolvable entries are never the output file
        return False


def walk(
    input_path: PathLike,
    matcher: ExcludeMatcher,
    skip_hidden: bool = False,
    output_path: Optional[PathLike] = None,
    verbose: bool = False,
) -> Iterator[Path]:
    """Lazily yield every regular file under *input_path* that survives filtering.

    The input path is checked up front so a missing path raises
    :class:`InputPathNotFound` before any traversal starts. Excluded and (with
    *skip_hidden*) dot-named directories are pruned, never entered. The file at
    *output_path* is always skipped. Unreadable entries are skipped.
    """
    top = validate_input_path(input_path)
    output_real = Path(output_path).resolve() if output_path is not None else None
    return _walk_files(top, matcher, skip_hidden, output_real, verbose)


def _walk_files(
    top: Path,
    matcher: ExcludeMatcher,
    skip_hidden: bool,
    output_real: Optional[Path],
    verbose: bool,
) -> Iterator[Path]:
    if matcher.is_excluded(top, base=top):
        return
    if not top.is_dir():
        if top.is_file() and not _same_file(top, output_real):
            yield top
        return

    def _keep(path: Path, is_dir: bool) -> bool:
        if matcher.is_excluded(path, is_dir=is_dir, base=top):
            if verbose:
                _log(f"Excluded '{path}'")
            return False
        return not (skip_hidden and is_hidden(path, verbose=verbose))

    def _on_error(err: OSError) -> None:
        skipped = EntryAccessError(f"Cannot access {err.filename}: {err.strerror}")
        if verbose:
            _log(f"! {skipped}", Fore.YELLOW)

    for dirpath, dirnames, filenames in os.walk(top, onerror=_on_error):
        here = Path(dirpath)
        dirnames[:] = sorted(d for d in dirnames if _keep(here / d, True))

        for name in sorted(filenames):
            path = here / name
            if _same_file(path, output_real):
                continue
            if not _keep(path, False):
                continue
            try:
                regular = path.is_file()
            except OSError as e:
                _on_error(e)
                continue
            if regular:
                yield path


# Aggregation
def _is_binary(data: bytes) -> bool:
    return b"\0" in data


def read_text(path: Path) -> str:
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise ContentReadError(f"Could not read '{path}': {e}") from e
    if _is_binary(raw):
        raise ContentReadError(f"'{path}' looks like a binary file")
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ContentReadError(f"'{path}' is not valid UTF-8 text: {e}") from e


def header_path(path: Path, root: Path) -> str:
    """Posix path of *path* relative to *root*, or *path* itself outside it."""
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        pass
    try:
        return path.resolve().relative_to(root).as_posix()
    except (ValueError, OSError, RuntimeError):
        return path.as_posix()


def _discard(out_path: Path) -> None:
    try:
        out_path.unlink()
    except FileNotFoundError:
        pass


def aggregate(
    paths: Iterable[PathLike],
    root: PathLike,
    out_path: PathLike,
    skip_unreadable: bool = False,
    verbose: bool = False,
) -> int:
    """Write every file in *paths* to *out_path* and return how many were written.

    Each record is a ``==> <relative path>`` line followed by the file's text
    with trailing whitespace trimmed and a single newline; consecutive records
    are separated by one blank line. Only *out_path* is created; its parent
    directory must already exist. A file that cannot be read as text raises
    :class:`ContentReadError` and removes the partial output, unless
    *skip_unreadable* is set, in which case it is left out with a warning.
    """
    root = Path(root).resolve()
    try:
        out_path = Path(out_path).resolve()
        out_fh = out_path.open("w", encoding="utf-8", newline="\n")
    except (OSError, RuntimeError) as e:
        raise OutputOpenError(f"Could not open output file '{out_path}': {e}") from e

    written = 0
    try:
        with out_fh:
            for p in paths:
                p = Path(p)
                rel = header_path(p, root)
                try:
                    text = read_text(p)
                except ContentReadError as e:
                    if not skip_unreadable:
                        raise
                    _log(f"- Skipping {rel}: {e}", Fore.YELLOW, file=sys.stderr)
                    continue

                try:
                    if written:
                        out_fh.write("\n")
                    out_fh.write(f"==> {rel}\n")
                    out_fh.write(text.rstrip() + "\n")
                except OSError as e:
                    raise OutputWriteError(f"Could not write to output file '{out_path}': {e}") from e
                written += 1
                if verbose:
                    _log(f"+ {rel}")
    except TreeclipError:
        _discard(out_path)
        raise
    return written


# Pipeline
@dataclass(frozen=True)
class RunResult:
    output_path: Path
    file_count: int


def resolve_output_path(output_path: PathLike) -> Path:
    out = Path(output_path)
    if out.is_dir():
        out = out / DEFAULT_OUTPUT_NAME
    return out.resolve()


def run(
    input_path: PathLike,
    output_path: PathLike,
    root: Optional[PathLike] = None,
    patterns: Sequence[str] = (),
    skip_hidden: bool = False,
    extra_patterns_file: Optional[PathLike] = None,
    skip_unreadable: bool = False,
    verbose: bool = False,
) -> RunResult:
    """Run match → walk → aggregate and report where the output went."""
    root = Path(root).resolve() if root is not None else Path.cwd().resolve()
    out_path = resolve_output_path(output_path)
    top = validate_input_path(input_path)
    matcher = build_matcher(root, patterns, extra_patterns_file, verbose=verbose)

    if verbose:
        _log(f"Scanning {top} …")

    files = walk(top, matcher, skip_hidden=skip_hidden, output_path=out_path, verbose=verbose)
    count = aggregate(files, root, out_path, skip_unreadable=skip_unreadable, verbose=verbose)

    if verbose:
        _log(f"Done → {out_path}. {count} files written.", Fore.GREEN)
    return RunResult(output_path=out_path, file_count=count)
