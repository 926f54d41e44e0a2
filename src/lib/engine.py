"""
Playback engine for typewright

Types a tokenized string onto an output surface one token per step,
executing embedded directives as it reaches them.

Responsibilities:
- Own the session state (token buffer, cursor, status, speed, loop guard)
- Drive the step loop through the single-slot Scheduler
- Dispatch directives through alias resolution and the DirectiveRegistry
- Report progress to the start/typing/finish hooks
"""

import asyncio
from typing import Any, Callable, Dict, Optional, Union

from ..config import appsettings
from ..models.directives import AliasKind, AliasSpec
from ..models.parser import ResolvedDirective
from ..models.playback import PlaybackSnapshot, PlaybackState, PlaybackStatus, SuspensionKind
from .context import ConfigurationError, ContextStore
from .directives import DirectiveRegistry
from .log import LOG, WARN, ERROR
from .parser import alias_resolve, directive_parse
from .scheduler import Scheduler
from .surface import OutputSurface, surface_is
from .tokenizer import directive_is, directivesOnly_is, tokenize

Hook = Callable[[PlaybackSnapshot], Any]

HOOK_NAMES = ("on_start", "on_typing", "on_finish")


class Typewriter:
    """
    Incremental typing engine with an embedded directive language

    Example:
        surface = BufferSurface()
        typewriter = Typewriter(surface, speed=30)
        typewriter.variable_set("name", "Reza")
        typewriter.write("Hi [@var:name]![@delay:500] Bye.")
        await typewriter.join()

    write(), pause(), resume() and skip() are synchronous and must be
    called while an asyncio event loop is running; the typing itself runs
    as a task on that loop.
    """

    def __init__(
        self,
        surface: OutputSurface,
        speed: Optional[float] = None,
        on_start: Optional[Hook] = None,
        on_typing: Optional[Hook] = None,
        on_finish: Optional[Hook] = None,
        scheduler: Optional[Scheduler] = None,
        context: Optional[ContextStore] = None,
        registry: Optional[DirectiveRegistry] = None,
        max_executions: Optional[int] = None,
    ) -> None:
        """
        Initialize the engine

        Args:
            surface: Sink receiving typed text
            speed: Time units between literal tokens (default: appsettings.default_speed)
            on_start: Called with a snapshot when write() starts a session
            on_typing: Called with a snapshot after every literal token
            on_finish: Called with a snapshot when a session completes
            scheduler: Suspension scheduler (default: a new Scheduler)
            context: Variables/functions/aliases (default: an empty ContextStore)
            registry: Directive dispatch table (default: built-ins)
            max_executions: Loop guard cap (default: appsettings.max_executions)

        Raises:
            ConfigurationError: If the surface, speed, a hook or max_executions is invalid
        """
        if not surface_is(surface):
            raise ConfigurationError(
                "Initialization failed. An output surface with 'append' and 'attached' is required."
            )

        if speed is not None and (
            isinstance(speed, bool) or not isinstance(speed, (int, float)) or speed < 0
        ):
            raise ConfigurationError("Invalid 'speed' value. It must be a non-negative number.")

        hooks = {"on_start": on_start, "on_typing": on_typing, "on_finish": on_finish}
        for name, hook in hooks.items():
            if hook is not None and not callable(hook):
                raise ConfigurationError(f"Invalid callback for '{name}'. It must be callable.")

        if max_executions is None:
            max_executions = appsettings.max_executions
        if isinstance(max_executions, bool) or not isinstance(max_executions, int) or max_executions < 1:
            raise ConfigurationError("Invalid 'max_executions' value. It must be a positive integer.")

        self.surface = surface
        self.hooks: Dict[str, Optional[Hook]] = hooks
        self.context = context if context is not None else ContextStore()
        self.scheduler = scheduler if scheduler is not None else Scheduler()
        self.directives = registry if registry is not None else DirectiveRegistry()
        self.max_executions = max_executions

        self.state = PlaybackState(
            speed=appsettings.default_speed if speed is None else speed
        )
        self._task: Optional["asyncio.Task[None]"] = None
        # Session whose tick loop is awaiting a directive, if any
        self._inflight: Optional[int] = None
        self._done = asyncio.Event()
        self._done.set()

    # ------------------------------------------------------------------
    # Read-only API
    # ------------------------------------------------------------------

    @property
    def api(self) -> PlaybackSnapshot:
        """Snapshot of tokens, cursor and progress"""
        return self.state.snapshot()

    @property
    def status(self) -> PlaybackStatus:
        return self.state.status

    @property
    def speed(self) -> float:
        return self.state.speed

    @property
    def aborted(self) -> bool:
        """True if the last session was stopped before it could finish"""
        return self.state.aborted

    def directivesOnly_is(self, text: Any) -> bool:
        """Check if text consists of directives and nothing else"""
        return directivesOnly_is(text)

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def variable_set(self, key: str, value: Any) -> None:
        self.context.variable_set(key, value)

    def function_set(self, key: str, fn: Callable[..., Any]) -> None:
        self.context.function_set(key, fn)

    def alias_set(
        self, key: str, function_name: str, kind: Union[str, AliasKind] = "run"
    ) -> AliasSpec:
        return self.context.alias_set(key, function_name, kind)

    # ------------------------------------------------------------------
    # Playback control
    # ------------------------------------------------------------------

    def write(self, text: str) -> None:
        """
        Start typing text, replacing any session in progress

        Raises:
            ConfigurationError: If text is not a string
            RuntimeError: If no event loop is running
        """
        if not isinstance(text, str):
            raise ConfigurationError("Invalid argument for 'write'. Expected a string.")

        self.session_clear()
        self.state.tokens = tokenize(text)
        self.state.status = PlaybackStatus.TYPING
        self.state.aborted = False
        self._done.clear()
        LOG(f"Session {self.state.session}: typing {len(self.state.tokens)} tokens", level=2)

        self.hook_run("on_start")
        self.loop_spawn()

    def pause(self) -> None:
        """Stop after the current token; a delay or async wait already running still completes"""
        if self.state.status is not PlaybackStatus.TYPING:
            return

        pending = self.scheduler.pending
        if pending is not None and pending.kind is SuspensionKind.PACING:
            self.scheduler.cancel(pending)
        self.state.status = PlaybackStatus.PAUSED
        LOG("Paused", level=2)

    def resume(self) -> None:
        """Continue a paused session"""
        if self.state.status is not PlaybackStatus.PAUSED:
            return

        self.state.status = PlaybackStatus.TYPING
        LOG("Resumed", level=2)
        # A loop still waiting on a delay/async picks up typing by itself
        if self._task is None or self._task.done():
            self.loop_spawn()

    def skip(self) -> None:
        """
        Type the rest of the session at once

        Pending waits are released, delay/async directives (and aliases
        resolving to async) are dropped without running, other directives
        run immediately, and the remaining text is appended in one piece.
        """
        if self.state.status is not PlaybackStatus.TYPING:
            return
        if not self.surface.attached:
            return

        # The interrupted directive has already run once
        if self._inflight == self.state.session:
            self.state.cursor += 1
            self._inflight = None

        self.state.session += 1
        self.scheduler.clear()
        self.state.status = PlaybackStatus.SKIPPING
        LOG("Skipping to the end", level=2)

        self._task = asyncio.get_running_loop().create_task(self.skip_drain(self.state.session))

    async def join(self) -> None:
        """Wait until the current session finishes or is aborted"""
        await self._done.wait()

    def close(self) -> None:
        """Stop any session and release pending waits"""
        self.session_clear()
        self.state.status = PlaybackStatus.IDLE
        self._done.set()

    # ------------------------------------------------------------------
    # Step loop
    # ------------------------------------------------------------------

    def loop_spawn(self) -> None:
        self._task = asyncio.get_running_loop().create_task(self.tick_loop(self.state.session))

    def session_live(self, session: int) -> bool:
        return self.state.session == session

    async def tick_loop(self, session: int) -> None:
        """
        Consume tokens while typing

        Directives run back to back; each literal token is followed by a
        pacing wait of `speed` time units. The loop returns as soon as the
        status leaves TYPING or a newer session has started.
        """
        state = self.state

        while self.session_live(session) and state.status is PlaybackStatus.TYPING:
            if not self.surface.attached:
                WARN("Output surface is no longer attached. Execution aborted.")
                self.playback_abort()
                return

            state.executions += 1
            if state.executions > self.max_executions:
                ERROR("Execution stopped due to a potential infinite loop.")
                self.playback_abort()
                return

            if state.exhausted:
                self.playback_finish()
                return

            token = state.token_current()

            if directive_is(token):
                resolved = self.directive_resolve(token)
                if resolved is not None:
                    self._inflight = session
                    await self.directive_run(resolved)
                    if not self.session_live(session):
                        return
                    self._inflight = None
                state.cursor += 1
                continue

            self.surface.append(token)
            state.cursor += 1
            state.executions = 0
            self.hook_run("on_typing")

            await self.scheduler.schedule(state.speed)

    async def skip_drain(self, session: int) -> None:
        """Run the remainder of the session without waiting"""
        state = self.state
        pending_text = []
        tripped = False

        while not state.exhausted:
            if not self.session_live(session):
                return

            state.executions += 1
            if state.executions > self.max_executions:
                ERROR("Skip aborted due to a potential infinite loop.")
                tripped = True
                break

            token = state.token_current()

            if directive_is(token):
                resolved = self.directive_resolve(token)
                if resolved is not None and not self.directives.suspends(resolved):
                    await self.directive_run(resolved)
                    if not self.session_live(session):
                        return
                state.cursor += 1
                continue

            pending_text.append(token)
            state.cursor += 1
            state.executions = 0

        if pending_text:
            self.surface.append("".join(pending_text))

        if tripped:
            self.playback_abort()
        else:
            self.playback_finish()

    # ------------------------------------------------------------------
    # Directives
    # ------------------------------------------------------------------

    def directive_resolve(self, token: str) -> Optional[ResolvedDirective]:
        """Parse a directive token and resolve aliases; unknown types are reported"""
        directive = directive_parse(token)
        resolved = alias_resolve(directive, self.context)
        if resolved is None:
            WARN(f"Unknown directive '{directive.type}'. It will be ignored.")
        return resolved

    async def directive_run(self, directive: ResolvedDirective) -> None:
        """Dispatch a resolved directive to its handler"""
        if self.state.status not in (PlaybackStatus.TYPING, PlaybackStatus.SKIPPING):
            return

        handler = self.directives.get(directive.type)
        if handler is None:
            WARN(f"Unknown directive '{directive.type.value}'. It will be ignored.")
            return

        LOG(f"Directive {directive.type.value}:{directive.value}", level=3)
        await handler(directive, self)

    def text_inject(self, text: str) -> None:
        """Tokenize text and insert it right after the cursor"""
        if not text:
            return
        self.state.tokens_insert(tokenize(text))

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    def session_clear(self) -> None:
        """Invalidate running loops, release waits and empty the buffer"""
        self.state.session += 1
        self.scheduler.clear()
        self.state.reset()

    def playback_finish(self) -> None:
        self.state.status = PlaybackStatus.IDLE
        session = self.state.session
        LOG("Finished", level=2)
        self.hook_run("on_finish")

        # on_finish may have started a new session with write()
        if self.session_live(session):
            self.session_clear()
            self._done.set()

    def playback_abort(self) -> None:
        self.state.status = PlaybackStatus.IDLE
        self.state.aborted = True
        self.session_clear()
        self._done.set()

    def hook_run(self, name: str) -> None:
        """Call a hook with a snapshot; its errors are logged, never raised"""
        hook = self.hooks.get(name)
        if hook is None:
            return

        try:
            hook(self.api)
        except Exception as e:
            ERROR(f"Error occurred in event '{name}'.", e)
