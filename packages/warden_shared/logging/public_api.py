"""Instrumentation for public API entry points.

``public_api_instrumented`` wraps a callable and reports one invocation event
and one completion event to each configured concern. Concerns are isolated
from each other and from the wrapped call: a failing hook is logged and
skipped.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import wraps
from time import perf_counter
from typing import Any, Callable, Mapping, Protocol, Sequence

from packages.warden_shared.errors import ErrorDetail

from . import fields
from .context import log_context


@dataclass(frozen=True)
class InvocationContext:
    """Which API was called and the identifying arguments it was called with."""

    component_id: str
    api_name: str
    references: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class CompletionContext:
    """Outcome of one call. Failed calls carry error summaries and categories."""

    invocation: InvocationContext
    success: bool
    duration_ms: float
    errors: list[str] = field(default_factory=list)
    error_categories: list[str] = field(default_factory=list)


class PublicApiInstrumentationConcern(Protocol):
    """Receiver of invocation and completion events."""

    def on_invocation(self, context: InvocationContext) -> None: ...

    def on_completion(self, context: CompletionContext) -> None: ...


class PublicApiLoggingConcern:
    """Logs invocations and successes at DEBUG, failures at INFO."""

    def __init__(self, *, logger: Any) -> None:
        self._logger = logger

    def on_invocation(self, context: InvocationContext) -> None:
        with log_context(_base_fields(context, fields.PUBLIC_API_INVOCATION_EVENT)):
            self._logger.debug("Public API invocation")

    def on_completion(self, context: CompletionContext) -> None:
        payload = _base_fields(context.invocation, fields.PUBLIC_API_COMPLETION_EVENT)
        payload[fields.SUCCESS] = context.success
        payload[fields.DURATION_MS] = context.duration_ms
        if context.errors:
            payload[fields.ERRORS] = context.errors
        with log_context(payload):
            log = self._logger.debug if context.success else self._logger.info
            log("Public API completion")


def public_api_instrumented(
    *,
    component_id: str,
    api_name: str | None = None,
    id_fields: tuple[str, ...] = (),
    concerns: Sequence[PublicApiInstrumentationConcern] | None = None,
    logger: Any | None = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorate a public API callable.

    Passing ``logger`` adds a ``PublicApiLoggingConcern`` ahead of
    ``concerns``; at least one concern must result. ``id_fields`` names
    keyword arguments reported as references; unset or empty values are
    left out and enum members are reported by value. Exceptions count as
    failed completions and propagate unchanged. When the exception carries
    an ``errors`` sequence of ``ErrorDetail`` those are summarized.
    """
    active = tuple(concerns or ())
    if logger is not None:
        active = (PublicApiLoggingConcern(logger=logger), *active)
    if not active:
        raise ValueError("public_api_instrumented requires at least one concern")

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        name = api_name or func.__name__

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            invocation = InvocationContext(
                component_id=component_id,
                api_name=name,
                references=_references(kwargs, id_fields),
            )
            _dispatch(active, "on_invocation", invocation, invocation, logger)
            started = perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as exc:
                errors, categories = _describe(getattr(exc, "errors", None))
                completion = CompletionContext(
                    invocation=invocation,
                    success=False,
                    duration_ms=_elapsed_ms(started),
                    errors=errors or [f"{type(exc).__name__}: {exc}"],
                    error_categories=categories or ["internal"],
                )
                _dispatch(active, "on_completion", completion, invocation, logger)
                raise
            completion = CompletionContext(
                invocation=invocation,
                success=True,
                duration_ms=_elapsed_ms(started),
            )
            _dispatch(active, "on_completion", completion, invocation, logger)
            return result

        return wrapper

    return decorator


def public_api_logged(
    *,
    logger: Any,
    component_id: str,
    api_name: str | None = None,
    id_fields: tuple[str, ...] = (),
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Shorthand for ``public_api_instrumented`` with logging only."""
    return public_api_instrumented(
        component_id=component_id,
        api_name=api_name,
        id_fields=id_fields,
        logger=logger,
    )


def _references(
    kwargs: Mapping[str, Any], id_fields: tuple[str, ...]
) -> dict[str, str]:
    references: dict[str, str] = {}
    for name in id_fields:
        value = kwargs.get(name)
        if value is None or value == "":
            continue
        references[name] = str(getattr(value, "value", value))
    return references


def _describe(errors: object) -> tuple[list[str], list[str]]:
    if not isinstance(errors, (list, tuple)):
        return [], []
    details = [item for item in errors if isinstance(item, ErrorDetail)]
    return (
        [detail.summary() for detail in details if detail.message],
        [detail.category.value for detail in details],
    )


def _elapsed_ms(started: float) -> float:
    return round((perf_counter() - started) * 1000.0, 3)


def _base_fields(context: InvocationContext, event: str) -> dict[str, object]:
    return {
        fields.EVENT: event,
        fields.COMPONENT_ID: context.component_id,
        fields.API_NAME: context.api_name,
        **context.references,
    }


def _dispatch(
    concerns: Sequence[PublicApiInstrumentationConcern],
    hook: str,
    context: InvocationContext | CompletionContext,
    invocation: InvocationContext,
    logger: Any | None,
) -> None:
    stage = hook.removeprefix("on_")
    for concern in concerns:
        try:
            getattr(concern, hook)(context)
        except Exception as exc:  # noqa: BLE001
            if logger is None:
                continue
            with log_context(
                {
                    fields.EVENT: fields.PUBLIC_API_INSTRUMENTATION_FAILURE_EVENT,
                    fields.COMPONENT_ID: invocation.component_id,
                    fields.API_NAME: invocation.api_name,
                    fields.STAGE: stage,
                    fields.CONCERN: type(concern).__name__,
                    fields.ERRORS: f"{type(exc).__name__}: {exc}",
                }
            ):
                logger.warning("Public API instrumentation concern failed")
