"""One-shot wrapping helpers built on Writer."""

import io

from .writer import Writer


def wrap_bytes(b: bytes, width: int, *, tab_width: int = 0, prefix: str = "",
               breakpoints: str = "", position: int = 0) -> bytes:
    """Word-wrap a UTF-8 byte string at ``width`` columns.

    Keyword options configure the Writer the same way its setters do:
    - tab_width expands tabs to spaces aligned on that many columns
    - prefix is written at the start of every line after the first
    - breakpoints lists extra characters a line may break after
    - position is the column the first line starts at
    """
    buf = io.BytesIO()
    with Writer(buf, width) as writer:
        writer.set_tab_width(tab_width)
        writer.set_prefix(prefix)
        writer.set_breakpoints(breakpoints)
        writer.set_position(position)
        writer.write(b)
    return buf.getvalue()


def wrap_string(s: str, width: int, **options) -> str:
    """Word-wrap a string at ``width`` columns. See wrap_bytes for options."""
    wrapped = wrap_bytes(s.encode("utf-8", "surrogateescape"), width, **options)
    return wrapped.decode("utf-8", "surrogateescape")
