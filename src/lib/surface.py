"""
Output surfaces for typewright

An output surface is an append-only sink for typed text plus a liveness
check. Markup is passed through untouched; the caller trusts its source.
"""

from typing import IO, List, Optional, Protocol, runtime_checkable


@runtime_checkable
class OutputSurface(Protocol):
    """Sink the engine types into"""

    @property
    def attached(self) -> bool:
        """False once the surface can no longer receive text"""
        ...

    def append(self, text: str) -> None:
        ...


def surface_is(candidate: object) -> bool:
    """Check if an object satisfies the OutputSurface contract"""
    return callable(getattr(candidate, "append", None)) and hasattr(candidate, "attached")


class BufferSurface:
    """
    In-memory surface

    Keeps every appended fragment; useful for tests and for collecting
    a transcript.

    Example:
        >>> surface = BufferSurface()
        >>> surface.append("Hi")
        >>> surface.text
        'Hi'
    """

    def __init__(self) -> None:
        self.fragments: List[str] = []
        self._attached = True

    @property
    def attached(self) -> bool:
        return self._attached

    def append(self, text: str) -> None:
        self.fragments.append(text)

    def detach(self) -> None:
        self._attached = False

    @property
    def text(self) -> str:
        return "".join(self.fragments)


class StreamSurface(BufferSurface):
    """
    Surface writing each fragment to a text stream (e.g. sys.stdout)

    Fragments are also buffered so the full text can be saved afterwards.
    The surface detaches when the stream is closed.
    """

    def __init__(self, stream: IO[str], flush: bool = True) -> None:
        super().__init__()
        self.stream: Optional[IO[str]] = stream
        self.flush = flush

    @property
    def attached(self) -> bool:
        return self._attached and self.stream is not None and not self.stream.closed

    def append(self, text: str) -> None:
        super().append(text)
        if self.stream is None:
            return
        self.stream.write(text)
        if self.flush:
            self.stream.flush()
