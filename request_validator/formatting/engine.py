"""Process-wide message formatter with replace/add/revert semantics.

The active renderer set is the one piece of shared mutable state in the
package. It is expected to change rarely (at startup, or in tests through
`snapshot`/`restore`) and to be read by every failing request. Writers hold a
lock and swap in a fresh dict, so `format` callers always see a complete set.
"""

from __future__ import annotations

from collections.abc import Callable
from collections.abc import Mapping
import logging
import threading

from request_validator.formatting.renderers import DEFAULT_RENDERERS
from request_validator.formatting.renderers import Renderer
from request_validator.formatting.renderers import RendererSet
from request_validator.formatting.renderers import render_default
from request_validator.validation.codes import FailureCode
from request_validator.validation.codes import normalize_code
from request_validator.validation.failure import ValidationFailure

logger = logging.getLogger(__name__)


def _normalize(renderers: RendererSet) -> dict[FailureCode | str, Renderer]:
    return {normalize_code(code): renderer for code, renderer in renderers.items()}


def _code_names(renderers: Mapping[FailureCode | str, Renderer]) -> list[str]:
    return sorted(code.value if isinstance(code, FailureCode) else str(code) for code in renderers)


class MessageFormatter:
    """Dispatch validation failures to renderers keyed by failure code."""

    def __init__(
        self,
        renderers: RendererSet | None = None,
        *,
        default_renderer: Renderer = render_default,
    ) -> None:
        self._defaults = _normalize(DEFAULT_RENDERERS if renderers is None else renderers)
        self._default_renderer = default_renderer
        self._active = dict(self._defaults)
        self._lock = threading.RLock()

    def replace(self, renderers: RendererSet) -> None:
        """Discard the active set and install `renderers` in its place."""
        replacement = _normalize(renderers)
        with self._lock:
            self._active = replacement
        logger.info("Replaced message formatters codes=%s", _code_names(replacement))

    def add(self, renderers: RendererSet) -> None:
        """Merge `renderers` into the active set, overriding same-keyed entries."""
        additions = _normalize(renderers)
        with self._lock:
            merged = dict(self._active)
            merged.update(additions)
            self._active = merged
        logger.info("Added message formatters codes=%s", _code_names(additions))

    def get_active(self) -> dict[FailureCode | str, Renderer]:
        """Return a free-standing copy of the active set."""
        return dict(self._active)

    def snapshot(self) -> dict[FailureCode | str, Renderer]:
        return self.get_active()

    def restore(self, snapshot: RendererSet) -> None:
        with self._lock:
            self._active = _normalize(snapshot)

    def reset(self) -> None:
        """Reinstall the renderers this formatter was created with."""
        self.restore(self._defaults)

    def resolve(
        self,
        replace: RendererSet | None = None,
        add: RendererSet | None = None,
    ) -> dict[FailureCode | str, Renderer]:
        """Build the effective renderer set for one call without touching the active set."""
        effective = _normalize(replace) if replace is not None else self.get_active()
        if add is not None:
            effective.update(_normalize(add))
        return effective

    def format(
        self,
        failure: ValidationFailure,
        replace: RendererSet | None = None,
        add: RendererSet | None = None,
    ) -> str:
        """Render `failure` with the active set, or with call-scoped overrides when given."""
        if replace is None and add is None:
            renderers: Mapping[FailureCode | str, Renderer] = self._active
        else:
            renderers = self.resolve(replace, add)

        renderer = renderers.get(failure.code, self._default_renderer)
        return renderer(failure)

    def bind(
        self,
        base_path: str | None = None,
        replace: RendererSet | None = None,
        add: RendererSet | None = None,
    ) -> Callable[[ValidationFailure], str]:
        """Return a formatter rendering every failure below `base_path`."""

        def _format(failure: ValidationFailure) -> str:
            return self.format(failure.relocate(base_path), replace, add)

        return _format


message_formatter = MessageFormatter()


def replace_formatters(renderers: RendererSet) -> None:
    message_formatter.replace(renderers)


def add_formatters(renderers: RendererSet) -> None:
    message_formatter.add(renderers)


def get_formatters() -> dict[FailureCode | str, Renderer]:
    return message_formatter.get_active()


def reset_formatters() -> None:
    message_formatter.reset()


def format_message(
    failure: ValidationFailure,
    replace: RendererSet | None = None,
    add: RendererSet | None = None,
) -> str:
    """Render `failure` through the process-wide formatter."""
    return message_formatter.format(failure, replace, add)
