"""Streaming word-wrap writer.

Writer wraps UTF-8 encoded text at word boundaries when lines exceed a limit
number of characters. Newlines are preserved, including consecutive and
trailing newlines, though trailing whitespace is stripped from each line.

Text is reflowed as it arrives: only the word currently being built and the
run of whitespace in front of it are held back, so any amount of input can be
streamed through a single Writer.
"""

from typing import Iterable

from .types import Sink, SinkWriteError

# Invalid input bytes are carried as lone surrogates so they reach the sink
# unchanged and count as one column each.
_ENCODING = "utf-8"
_ERRORS = "surrogateescape"

# Python counts the ASCII information separators as whitespace; Unicode does not.
_SEPARATORS = frozenset("\x1c\x1d\x1e\x1f")


def _is_space(ch: str) -> bool:
    return ch.isspace() and ch not in _SEPARATORS


def _encoded_len(ch: str) -> int:
    return len(ch.encode(_ENCODING, _ERRORS))


class Writer:
    """Reflows text written to it onto ``sink`` at ``width`` columns.

    Width and position are counted in code points. A width below 1 turns the
    writer into a plain pass-through.

    The word being accumulated is only written out at the next word boundary
    or newline; call ``flush()`` (or use the writer as a context manager) once
    the input ends so the last word is not left behind.
    """

    def __init__(self, sink: Sink, width: int):
        self._sink = sink
        self.width = int(width)
        self.tab_width = 0
        self.pos = 0                    # current line position
        self._space: list[str] = []     # trailing word spaces
        self._word: list[str] = []      # word builder
        self._new_line = False          # a line break was just written
        self._prefix = ""
        self._breakpoints: frozenset[str] = frozenset()
        self._consumed = 0              # input bytes handled by the current call

    # -- configuration ---------------------------------------------------------

    def set_width(self, width: int) -> None:
        """Set the wrap width in code points. Below 1 disables wrapping."""
        self.width = int(width)

    def set_tab_width(self, width: int) -> None:
        """Set the width of tab characters.

        Tabs are converted to spaces aligned on a multiple of ``width``
        columns. With 0 (the default) a tab is kept as is.
        """
        if width < 0:
            raise ValueError(f"tab width must be >= 0, got {width}")
        self.tab_width = width

    def set_prefix(self, prefix: str) -> None:
        """Set the prefix written at the start of each new line.

        The prefix does not affect the first line, nor the line currently
        being written.
        """
        self._prefix = prefix

    @property
    def prefix(self) -> str:
        return self._prefix

    def set_breakpoints(self, chars: str | Iterable[str]) -> None:
        """Set additional word break characters, e.g. ``"-:/"``.

        A breakpoint is written through immediately and ends the current
        word, so the line may wrap right after it.
        """
        self._breakpoints = frozenset(chars)

    @property
    def breakpoints(self) -> frozenset[str]:
        return self._breakpoints

    def set_position(self, pos: int) -> None:
        """Set the current line position for correct wrapping of text that
        continues an already started line. A negative value increases the
        allowed length of the first line.
        """
        self.pos = pos

    # -- sink output -----------------------------------------------------------

    def _emit(self, text: str) -> None:
        if not text:
            return
        try:
            self._sink.write(text.encode(_ENCODING, _ERRORS))
        except Exception as e:
            raise SinkWriteError(self._consumed, e) from e

    def _write_prefix(self) -> None:
        if not self._new_line:
            return
        self._new_line = False
        if not self._prefix:
            return
        self.pos += len(self._prefix)
        self._emit(self._prefix)

    def _write_spaces(self) -> None:
        spaces = "".join(self._space)
        self._space.clear()
        self.pos += len(spaces)
        self._emit(spaces)

    def _write_word(self) -> None:
        if not self._word:
            return
        self._write_prefix()
        self._write_spaces()
        word = "".join(self._word)
        self._word.clear()
        self.pos += len(word)
        self._emit(word)

    def _write_new_line(self) -> None:
        self._write_prefix()
        self._new_line = True
        self.pos = 0
        self._space.clear()
        self._emit("\n")

    # -- state machine ---------------------------------------------------------

    def _step(self, ch: str) -> None:
        if ch == "\n":
            # keep the trailing spaces only if they still fit on the line
            if not self._word:
                if self.pos + len(self._space) > self.width:
                    self._space.clear()
                elif self._space:
                    self._write_prefix()
                    self._write_spaces()
            self._write_word()
            self._write_new_line()
        elif _is_space(ch):
            self._write_word()
            if ch == "\t" and self.tab_width > 0:
                self._space.extend(" " * (self.tab_width - self.pos % self.tab_width))
            else:
                self._space.append(ch)
        elif ch in self._breakpoints:
            self._write_prefix()
            self._write_spaces()
            self._write_word()
            self._emit(ch)
            self.pos += 1
        else:
            self._word.append(ch)
            # break before the word once it would reach the limit; a word
            # longer than the whole width is left to overflow
            word_len = len(self._word)
            if (self.pos + word_len + len(self._space) >= self.width
                    and word_len <= self.width):
                self._write_new_line()

    # -- writing ---------------------------------------------------------------

    def write(self, data: bytes) -> int:
        """Write UTF-8 encoded bytes, wrapping them at word boundaries.

        Returns the number of bytes consumed. If the sink fails, a
        SinkWriteError carrying the count of bytes consumed so far is raised
        and the remaining input is left unprocessed.
        """
        data = bytes(data)
        self._consumed = 0
        if self.width < 1:
            try:
                self._sink.write(data)  # no wrap
            except Exception as e:
                raise SinkWriteError(0, e) from e
            return len(data)
        for ch in data.decode(_ENCODING, _ERRORS):
            self._consumed += _encoded_len(ch)
            self._step(ch)
        return self._consumed

    def write_string(self, s: str) -> int:
        """Write a string. Returns the number of UTF-8 bytes consumed."""
        return self.write(s.encode(_ENCODING, _ERRORS))

    def write_byte(self, b: int) -> None:
        self.write(bytes((b,)))

    def write_rune(self, ch: str) -> int:
        """Write a single character. Returns its encoded size in bytes."""
        if len(ch) != 1:
            raise ValueError(f"expected a single character, got {ch!r}")
        return self.write_string(ch)

    def printf(self, fmt: str, *args: object) -> int:
        """Format ``fmt % args`` and write the result."""
        return self.write_string(fmt % args)

    def flush(self) -> None:
        """Write out the pending word.

        Whitespace seen after the last word is dropped rather than written.
        """
        self._consumed = 0
        self._write_word()

    def close(self) -> None:
        """Flush the last word. The sink itself is left open."""
        self.flush()

    def __enter__(self) -> "Writer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.close()
