"""Configuration models for the reflow package."""

from dataclasses import dataclass

from pydantic import BaseModel, Field

from .types import Sink
from .writer import Writer


class WrapConfig(BaseModel):
    """Options for a Writer, validated before the writer is built."""
    width: int = Field(80, description="Wrap width in characters; below 1 disables wrapping")
    tab_width: int = Field(0, ge=0, description="Tab stop width; 0 keeps tabs as they are")
    prefix: str = Field("", description="Written at the start of every line after the first")
    position: int = Field(0, description="Column the first line starts at; negative adds slack")
    breakpoints: str = Field("", description="Extra characters a line may break after, e.g. '-/'")

    def build(self, sink: Sink) -> Writer:
        """Return a Writer over ``sink`` configured from these options."""
        writer = Writer(sink, self.width)
        writer.set_tab_width(self.tab_width)
        writer.set_prefix(self.prefix)
        writer.set_breakpoints(self.breakpoints)
        writer.set_position(self.position)
        return writer


@dataclass
class FetchConfig:
    """Tuning constants for reading input over HTTP.

    Defaults suit an interactive command; override individual fields as
    needed.
    """
    connect_timeout: float = 10.0
    read_timeout: float = 60.0
    max_retries: int = 3
    initial_delay: float = 1.0
    chunk_size: int = 64 * 1024
