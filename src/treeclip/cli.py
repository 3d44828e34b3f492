"""
CLI entrypoint for treeclip package.
"""
import argparse
import random
import sys
from pathlib import Path

from colorama import Fore, Style, init as colorama_init

from . import __version__
from .core import TreeclipError, run
from .handoff import ClipboardError, copy_to_clipboard, delete_output, open_in_editor
from .report import BANNER, file_stats, goodbye_message, render_stats_box, size_remark


def _parse_args(argv=None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="treeclip",
        description="Flatten a directory tree into one text file with '==> path' headers.",
    )
    p.add_argument(
        "input",
        nargs="?",
        type=Path,
        default=Path("."),
        help="Directory to traverse (default: current directory)",
    )
    p.add_argument(
        "output",
        nargs="?",
        type=Path,
        default=Path("."),
        help="Output file, or a directory to hold treeclip_temp.txt (default: .)",
    )
    p.add_argument(
        "-e",
        "--exclude",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Gitignore-style pattern to exclude (repeatable)",
    )
    p.add_argument("--root", type=Path, help="Directory headers are relative to (default: cwd)")
    p.add_argument(
        "--config",
        type=Path,
        help="Path to a file with extra ignore patterns (one per line)",
    )
    p.add_argument("-H", "--skip-hidden", action="store_true", help="Skip dot-files and dot-dirs")
    p.add_argument(
        "--skip-unreadable",
        action="store_true",
        help="Leave out files that are not UTF-8 text instead of failing",
    )
    p.add_argument(
        "--clipboard",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Copy the output to the clipboard (default: on)",
    )
    p.add_argument("--stats", action="store_true", help="Show content statistics")
    p.add_argument("--editor", action="store_true", help="Open the output in an editor")
    p.add_argument(
        "--delete",
        action="store_true",
        help="Delete the output after the editor returns (needs --editor)",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p.parse_args(argv)


def _say(msg: str, color: str = "") -> None:
    print(color + msg + Style.RESET_ALL if color else msg)


def main(argv=None) -> None:
    try:
        ns = _parse_args(argv)
        colorama_init()
        rng = random.Random()

        if ns.verbose:
            _say(BANNER, Fore.MAGENTA)

        try:
            result = run(
                ns.input,
                ns.output,
                root=ns.root,
                patterns=ns.exclude,
                skip_hidden=ns.skip_hidden,
                extra_patterns_file=ns.config,
                skip_unreadable=ns.skip_unreadable,
                verbose=ns.verbose,
            )
        except TreeclipError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)

        _say(f"🎉 Gathered {result.file_count} files into {result.output_path}", Fore.GREEN)

        if ns.clipboard:
            try:
                copy_to_clipboard(result.output_path)
                _say("📋 Clipboard updated! Ready to paste anywhere~", Fore.GREEN)
            except ClipboardError as e:
                print(Fore.YELLOW + f"Warning: {e}" + Style.RESET_ALL, file=sys.stderr)

        if ns.stats:
            stats = file_stats(result.output_path)
            _say(render_stats_box(stats), Fore.CYAN)
            emoji, remark = size_remark(stats.bytes)
            _say(f"{emoji} {remark}", Fore.YELLOW)

        if ns.editor:
            try:
                open_in_editor(result.output_path)
                if ns.delete:
                    delete_output(result.output_path)
                    if ns.verbose:
                        _say("✨ All cleaned up! No traces left behind~", Fore.GREEN)
            except TreeclipError as e:
                print(f"Error: {e}", file=sys.stderr)
                sys.exit(1)

        if ns.verbose:
            _say(goodbye_message(rng), Fore.GREEN)

    except KeyboardInterrupt:
        print("\nCancelled.", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
