"""reflow — streaming word wrap for text written through a writer.

Public API re-exports for convenient single-import usage.
"""

__version__ = "0.1.0"

from .config import FetchConfig, WrapConfig
from .sources import iter_file, iter_source, iter_url
from .text import wrap_bytes, wrap_string
from .types import Sink, SinkWriteError
from .writer import Writer

__all__ = [
    # writer
    "Writer",
    # text
    "wrap_bytes",
    "wrap_string",
    # config
    "FetchConfig",
    "WrapConfig",
    # sources
    "iter_file",
    "iter_source",
    "iter_url",
    # types
    "Sink",
    "SinkWriteError",
]
