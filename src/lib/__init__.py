"""
typewright - Incremental typing engine with an embedded directive language

Types text onto an output surface one token at a time while running
[@type:value] directives that change speed, wait, inject text or call
registered functions.
"""

__version__ = "1.0.0"

from .engine import Typewriter
from .context import ContextStore, ConfigurationError
from .directives import DirectiveRegistry
from .scheduler import Scheduler, Suspension
from .surface import OutputSurface, BufferSurface, StreamSurface
from .tokenizer import tokenize, directivesOnly_is
from .log import LOG, state_connectToLogger

__all__ = [
    "Typewriter",
    "ContextStore",
    "ConfigurationError",
    "DirectiveRegistry",
    "Scheduler",
    "Suspension",
    "OutputSurface",
    "BufferSurface",
    "StreamSurface",
    "tokenize",
    "directivesOnly_is",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
