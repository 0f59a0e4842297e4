"""
reflow: word-wrap text from files, stdin or URLs onto stdout.

Newlines in the input are kept, including blank lines; long lines are broken
at word boundaries and trailing whitespace is stripped.

Usage:
    reflow [-w WIDTH] [-t TAB_WIDTH] [-p PREFIX] [--first-prefix]
           [-b CHARS] [--position N] [SOURCE ...]

Examples:
    reflow -w 72 NOTES.txt
    git log -1 --format=%B | reflow -w 50 -p '> ' --first-prefix
    reflow -w 60 -b '-/' https://example.com/plain.txt
"""

import argparse
import sys

import httpx
from pydantic import ValidationError

from .config import FetchConfig, WrapConfig
from .sources import iter_source
from .types import SinkWriteError
from .ui import log_error


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="reflow",
        description="Word-wrap text from files, stdin or URLs onto stdout.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    p.add_argument(
        "sources", nargs="*", default=["-"], metavar="SOURCE",
        help="File path, http(s) URL, or - for stdin (default: -)",
    )
    p.add_argument(
        "-w", "--width", type=int, default=80,
        help="Maximum line width in characters; 0 disables wrapping (default: 80)",
    )
    p.add_argument(
        "-t", "--tab-width", type=int, default=0,
        help="Expand tabs to stops every N columns; 0 keeps tabs (default: 0)",
    )
    p.add_argument(
        "-p", "--prefix", default="",
        help="Prefix written at the start of each wrapped line after the first",
    )
    p.add_argument(
        "--first-prefix", action="store_true",
        help="Also write the prefix at the start of the first line",
    )
    p.add_argument(
        "-b", "--breakpoints", default="",
        help="Extra characters a line may break after, e.g. '-/'",
    )
    p.add_argument(
        "--position", type=int, default=0,
        help="Column the first line starts at (default: 0)",
    )
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)

    try:
        config = WrapConfig(
            width=args.width,
            tab_width=args.tab_width,
            prefix=args.prefix,
            position=args.position,
            breakpoints=args.breakpoints,
        )
    except ValidationError as e:
        log_error(str(e))
        sys.exit(1)

    fetch = FetchConfig()
    out = sys.stdout.buffer
    writer = config.build(out)
    try:
        if args.first_prefix:
            writer.write_string(config.prefix)
        for source in args.sources:
            for chunk in iter_source(source, fetch):
                writer.write(chunk)
        writer.flush()
        out.flush()
    except SinkWriteError as e:
        # a closed pipe downstream is not worth a message
        if not isinstance(e.__cause__, BrokenPipeError):
            log_error(str(e))
        sys.exit(1)
    except BrokenPipeError:
        sys.exit(1)
    except OSError as e:
        log_error(f"{e.filename or 'input'}: {e.strerror or e}")
        sys.exit(1)
    except httpx.HTTPStatusError as e:
        log_error(f"{e.request.url}: HTTP {e.response.status_code}")
        sys.exit(1)
    except httpx.HTTPError as e:
        log_error(f"{type(e).__name__}: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
