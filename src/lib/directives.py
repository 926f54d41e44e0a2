"""
Directive implementations for typewright

Each built-in directive is a coroutine handler (directive, engine) -> None
registered with a DirectiveSpec. Alias resolution happens before dispatch,
so handlers only ever see the six built-in types.
"""

import asyncio
import inspect
import math
from typing import Any, Callable, Dict, List, Optional, Set

from ..models.directives import DirectiveSpec, DirectiveCategory, DirectiveType
from ..models.parser import FunctionCall, ResolvedDirective
from ..models.playback import SuspensionKind
from .log import LOG, WARN, ERROR
from .parser import functionCall_unwrap, value_render


def duration_parse(value: str) -> Optional[float]:
    """
    Parse a non-negative, finite number of time units

    Example:
        >>> duration_parse("250")
        250.0
        >>> duration_parse("-1") is None
        True
    """
    try:
        number = float(value)
    except ValueError:
        return None
    if not math.isfinite(number) or number < 0:
        return None
    return number


def function_invoke(fn: Callable[..., Any], call: FunctionCall) -> Any:
    """Call fn with the single parameter, or with no argument when there is none"""
    if call.param is None:
        return fn()
    return fn(call.param)


# Strong references to fire-and-forget awaitables started by run
background_tasks: Set["asyncio.Future[Any]"] = set()


def background_report(task: "asyncio.Future[Any]", name: str) -> None:
    """Log the failure of a fire-and-forget awaitable started by run"""
    background_tasks.discard(task)
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        ERROR(f"Failed to execute function '{name}'.", error)


class DirectiveRegistry:
    """
    Registry of built-in directive specifications and handlers

    Maps each DirectiveType to the DirectiveSpec that executes it.
    """

    def __init__(self) -> None:
        """Initialize the directive registry and register all built-in directives"""
        self.specs: Dict[DirectiveType, DirectiveSpec] = {}
        self.pacingDirectives_register()
        self.contentDirectives_register()
        self.invocationDirectives_register()

    def register(self, spec: DirectiveSpec) -> None:
        """Register a directive specification"""
        self.specs[spec.type] = spec

    def get(self, directive_type: DirectiveType) -> Optional[Callable[[Any, Any], Any]]:
        """
        Get directive handler by type

        Returns:
            Handler coroutine function or None if not registered
        """
        spec = self.specs.get(directive_type)
        return spec.handler if spec else None

    def suspends(self, directive: ResolvedDirective) -> bool:
        """Check if a resolved directive waits, so skipping must drop it"""
        spec = self.specs.get(directive.type)
        return bool(spec and spec.suspends)

    def directives_listByCategory(self, category: DirectiveCategory) -> list[DirectiveSpec]:
        """Get all directives in a category"""
        return [spec for spec in self.specs.values() if spec.category == category]

    def directives_describe(self) -> str:
        """
        Render the built-in directives as help text, grouped by category

        Example:
            pacing:
              speed   Set the time units between literal tokens
                      e.g. [@speed:50]
        """
        lines: List[str] = []
        for category in DirectiveCategory:
            specs = self.directives_listByCategory(category)
            if not specs:
                continue
            lines.append(f"{category.value}:")
            for spec in specs:
                lines.append(f"  {spec.name:<7} {spec.description}")
                for example in spec.examples:
                    lines.append(f"  {'':<7} e.g. {example}")
        return "\n".join(lines)

    def pacingDirectives_register(self) -> None:
        """Register speed and delay"""

        async def speed_handler(directive: ResolvedDirective, engine: Any) -> None:
            """Handle [@speed:N] - change time units between literal tokens"""
            if not directive.value:
                return

            speed = duration_parse(directive.value)
            if speed is None:
                WARN(f"Invalid speed value '{directive.value}'. Directive ignored.")
                return
            engine.state.speed = speed
            LOG(f"Speed set to {speed}", level=3)

        async def delay_handler(directive: ResolvedDirective, engine: Any) -> None:
            """Handle [@delay:N] - wait N time units before continuing"""
            if not directive.value:
                return

            delay = duration_parse(directive.value)
            if delay is None:
                WARN(f"Invalid delay value '{directive.value}'. Directive ignored.")
                return
            LOG(f"Delaying for {delay}", level=3)
            await engine.scheduler.schedule(delay, SuspensionKind.DELAY)

        self.register(DirectiveSpec(
            type=DirectiveType.SPEED,
            category=DirectiveCategory.PACING,
            description="Set the time units between literal tokens",
            handler=speed_handler,
            examples=['[@speed:50]'],
        ))

        self.register(DirectiveSpec(
            type=DirectiveType.DELAY,
            category=DirectiveCategory.PACING,
            description="Pause typing for a number of time units",
            handler=delay_handler,
            suspends=True,
            examples=['Hello[@delay:1000] world'],
        ))

    def contentDirectives_register(self) -> None:
        """Register var and eval, which inject text after the cursor"""

        async def var_handler(directive: ResolvedDirective, engine: Any) -> None:
            """Handle [@var:name] - type the value of a registered variable"""
            if not directive.value:
                return

            if not engine.context.variable_has(directive.value):
                WARN(f"Variable '{directive.value}' is not defined.")
                return

            engine.text_inject(value_render(engine.context.variable_get(directive.value)))

        async def eval_handler(directive: ResolvedDirective, engine: Any) -> None:
            """Handle [@eval:fn(x)] - type the value a registered function returns"""
            found = self.function_lookup(directive, engine)
            if found is None:
                return
            fn, call = found
            session = engine.state.session

            try:
                value = function_invoke(fn, call)
            except Exception as e:
                ERROR(f"Failed to execute function '{call.name}'.", e)
                return

            if inspect.isawaitable(value):
                suspension = engine.scheduler.external_await(value)
                await suspension
                if suspension.forced:
                    return
                if suspension.error is not None:
                    ERROR(f"Failed to execute function '{call.name}'.", suspension.error)
                    return
                value = suspension.value

            # The function may have started a new session with write()
            if engine.state.session != session:
                LOG(f"Result of '{call.name}' dropped, its session has ended", level=3)
                return

            engine.text_inject(value_render(value))

        self.register(DirectiveSpec(
            type=DirectiveType.VAR,
            category=DirectiveCategory.CONTENT,
            description="Type the value of a registered variable",
            handler=var_handler,
            examples=['Hi [@var:name]!'],
        ))

        self.register(DirectiveSpec(
            type=DirectiveType.EVAL,
            category=DirectiveCategory.CONTENT,
            description="Type the value returned by a registered function",
            handler=eval_handler,
            examples=['Today is [@eval:today()]', "[@eval:upper('loud')]"],
        ))

    def invocationDirectives_register(self) -> None:
        """Register run and async, which call functions for their side effects"""

        async def run_handler(directive: ResolvedDirective, engine: Any) -> None:
            """Handle [@run:fn(x)] - call a function and continue immediately"""
            found = self.function_lookup(directive, engine)
            if found is None:
                return
            fn, call = found

            try:
                result = function_invoke(fn, call)
            except Exception as e:
                ERROR(f"Failed to execute function '{call.name}'.", e)
                return

            # Not awaited; failures still surface in the log
            if inspect.isawaitable(result):
                task = asyncio.ensure_future(result)
                background_tasks.add(task)
                task.add_done_callback(lambda finished: background_report(finished, call.name))

        async def async_handler(directive: ResolvedDirective, engine: Any) -> None:
            """Handle [@async:fn(x)] - call a function and wait until it settles"""
            found = self.function_lookup(directive, engine)
            if found is None:
                return
            fn, call = found

            try:
                result = function_invoke(fn, call)
            except Exception as e:
                ERROR(f"Failed to execute function '{call.name}'.", e)
                return

            if not inspect.isawaitable(result):
                return

            suspension = engine.scheduler.external_await(result)
            await suspension
            if suspension.error is not None and not suspension.forced:
                ERROR(f"Failed to execute function '{call.name}'.", suspension.error)

        self.register(DirectiveSpec(
            type=DirectiveType.RUN,
            category=DirectiveCategory.INVOCATION,
            description="Call a registered function, discarding its result",
            handler=run_handler,
            examples=["[@run:log('typed')]"],
        ))

        self.register(DirectiveSpec(
            type=DirectiveType.ASYNC,
            category=DirectiveCategory.INVOCATION,
            description="Call a registered function and wait for it to finish",
            handler=async_handler,
            suspends=True,
            examples=["[@async:fetch('/status')]"],
        ))

    def function_lookup(self, directive: ResolvedDirective, engine: Any) -> Optional[tuple]:
        """
        Find the function a run/async/eval directive names

        Returns:
            (function, FunctionCall), or None after a diagnostic when the
            function is not registered or not callable
        """
        if not directive.value:
            return None

        call = functionCall_unwrap(directive.value)
        fn = engine.context.function_get(call.name)
        if not callable(fn):
            WARN(f"Function '{call.name or directive.value}' is not defined or not callable.")
            return None
        return fn, call
