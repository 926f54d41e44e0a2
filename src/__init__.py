"""
typewright - Incremental typing engine with an embedded directive language

Types text onto an output surface one token at a time while running
[@type:value] directives that change speed, wait, inject text or call
registered functions.
"""

__version__ = "1.0.0"

from .lib import (
    Typewriter,
    ContextStore,
    ConfigurationError,
    BufferSurface,
    StreamSurface,
    tokenize,
    directivesOnly_is,
    LOG,
    state_connectToLogger,
)

__all__ = [
    "Typewriter",
    "ContextStore",
    "ConfigurationError",
    "BufferSurface",
    "StreamSurface",
    "tokenize",
    "directivesOnly_is",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
