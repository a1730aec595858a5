"""Resource loading and caching per (locale, module) pair.

ResourceStore owns the active locale and module sets, starts one load per
pair of their cross-product, and keeps every settled resource for the
lifetime of the store. Loads are never evicted: a pair dropped from the
active sets and selected again later reuses its first result.

Load lifecycle per pair:
    LOADING -> SUCCESS | NOT_FOUND | ERROR

Failures never propagate. A failed pair settles to an empty resource, is
logged, and is reported through ResourceLoadResult/LoadSummary.

Each pair is backed by a concurrent.futures.Future so that synchronous
loaders settle without an event loop, while awaitable loaders settle from
a task on the running loop and wait() can await either kind. An awaitable
returned while no loop is running is kept and scheduled by the first
wait() or set_* call made from inside a loop.

Python 3.13+.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable, Iterable
from concurrent.futures import Future
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from nestlex.diagnostics.errors import LoadFailureError
from nestlex.enums import LoadStatus
from nestlex.localization.loading import (
    LoadSummary,
    ResourceLoader,
    ResourceLoadResult,
    validate_resource,
)
from nestlex.localization.types import (
    KeyPath,
    LocaleCode,
    ModuleName,
    Notifier,
    NotifyHook,
    Resource,
    SubscriptionHandler,
)

__all__ = ["EMPTY_RESOURCE", "PendingLoad", "ResourceStore"]

logger = logging.getLogger(__name__)

EMPTY_RESOURCE: Resource = MappingProxyType({})
"""Resource substituted for failed loads."""


def _silent_notifier(key: KeyPath, raw: Resource | str | None) -> None:
    """Notifier that ignores every access."""


def _silent_notify(locale: LocaleCode, module: ModuleName, future: Future[Resource]) -> Notifier:
    """Default notify hook: no observation."""
    return _silent_notifier


@dataclass(slots=True)
class PendingLoad:
    """Load record for one (locale, module) pair.

    Mutability Note:
        Intentionally mutable (not frozen=True): status and error are
        updated exactly once, when the load settles.

    Attributes:
        locale: Locale of the pair
        module: Module of the pair
        future: Settles to the loaded resource, or to EMPTY_RESOURCE on failure
        status: Current load status
        error: Failure recorded at settlement, if any
        source_path: Loader-provided path description, if any
        task: Event loop task driving an awaitable loader result
        deferred: Awaitable loader result waiting for a running event loop
    """

    locale: LocaleCode
    module: ModuleName
    future: Future[Resource] = field(default_factory=Future)
    status: LoadStatus = LoadStatus.LOADING
    error: Exception | None = None
    source_path: str | None = None
    task: asyncio.Task[None] | None = None
    deferred: Awaitable[Any] | None = None

    @property
    def is_settled(self) -> bool:
        """Check if the load has completed (successfully or not)."""
        return self.future.done()

    @property
    def resource(self) -> Resource | None:
        """Settled resource, or None while loading."""
        return self.future.result() if self.future.done() else None

    def to_result(self) -> ResourceLoadResult:
        """Snapshot this record as an immutable load result."""
        return ResourceLoadResult(
            locale=self.locale,
            module=self.module,
            status=self.status,
            error=self.error,
            source_path=self.source_path,
        )


class ResourceStore:
    """Loads and caches resource trees per (locale, module) pair.

    Example:
        >>> store = ResourceStore(lambda locale, module: {"hi": "Hello"})
        >>> store.set_locales("en-US")
        >>> store.set_modules("base")
        >>> store.get_resource("en-US", "base")
        {'hi': 'Hello'}

    Attributes:
        locales: Active locales in fallback priority order
        modules: Active modules
    """

    __slots__ = (
        "_loader",
        "_loads",
        "_locales",
        "_modules",
        "_notifiers",
        "_notify",
        "_subscriptions",
    )

    def __init__(
        self,
        loader: ResourceLoader | Callable[[LocaleCode, ModuleName], Any],
        *,
        notify: NotifyHook | None = None,
    ) -> None:
        """Initialize an empty store.

        Args:
            loader: Callable returning a resource tree (or an awaitable of one)
            notify: Hook invoked once per pair to obtain its access notifier
        """
        self._loader = loader
        self._notify: NotifyHook = notify if notify is not None else _silent_notify
        self._locales: tuple[LocaleCode, ...] = ()
        self._modules: tuple[ModuleName, ...] = ()
        # dict as insertion-ordered set
        self._subscriptions: dict[SubscriptionHandler, None] = {}
        self._loads: dict[tuple[LocaleCode, ModuleName], PendingLoad] = {}
        self._notifiers: dict[tuple[LocaleCode, ModuleName], Notifier] = {}

    @property
    def locales(self) -> tuple[LocaleCode, ...]:
        """Active locales in fallback priority order."""
        return self._locales

    @property
    def modules(self) -> tuple[ModuleName, ...]:
        """Active modules."""
        return self._modules

    def __repr__(self) -> str:
        """Return string representation for debugging."""
        settled = sum(1 for record in self._loads.values() if record.is_settled)
        return (
            f"ResourceStore(locales={self._locales!r}, modules={self._modules!r}, "
            f"loads={settled}/{len(self._loads)})"
        )

    def set_locales(self, *locales: LocaleCode) -> None:
        """Replace the active locales and load any missing pairs.

        Duplicates are dropped; first occurrence wins the priority slot.
        """
        self._locales = tuple(dict.fromkeys(locales))
        self._reconcile()

    def set_modules(self, *modules: ModuleName) -> None:
        """Replace the active modules and load any missing pairs."""
        self._modules = tuple(dict.fromkeys(modules))
        self._reconcile()

    def subscribe(self, handler: SubscriptionHandler) -> None:
        """Register handler and call it immediately with the current sets."""
        self._subscriptions[handler] = None
        handler(self._locales, self._modules)

    def unsubscribe(self, handler: SubscriptionHandler) -> bool:
        """Remove handler.

        Returns:
            True if the handler was registered
        """
        if handler not in self._subscriptions:
            return False
        del self._subscriptions[handler]
        return True

    def wait(self) -> Awaitable[LoadSummary]:
        """Wait for every pair of the current cross-product to settle.

        The pairs are captured when wait() is called; pairs added by later
        set_locales/set_modules calls are not tracked by the returned awaitable.

        Returns:
            Awaitable resolving to a LoadSummary of the captured pairs.
            Never raises for load failures.
        """
        records = tuple(self._iter_active())
        return self._wait_for(records)

    async def _wait_for(self, records: tuple[PendingLoad, ...]) -> LoadSummary:
        self._start_deferred(records)
        pending = [asyncio.wrap_future(r.future) for r in records if not r.is_settled]
        if pending:
            await asyncio.gather(*pending)
        return LoadSummary(results=tuple(r.to_result() for r in records))

    def get_resource(self, locale: LocaleCode, module: ModuleName) -> Resource | None:
        """Get the settled resource for a pair, or None if not settled or never requested."""
        record = self._loads.get((locale, module))
        return record.resource if record is not None else None

    def get_notifier(self, locale: LocaleCode, module: ModuleName) -> Notifier | None:
        """Get the access notifier bound to a pair, or None if never requested."""
        return self._notifiers.get((locale, module))

    def is_settled(self, locale: LocaleCode, module: ModuleName) -> bool:
        """Check if a pair was requested and its load has completed."""
        record = self._loads.get((locale, module))
        return record is not None and record.is_settled

    def get_load_summary(self) -> LoadSummary:
        """Get a summary of every pair requested so far, active or not."""
        return LoadSummary(results=tuple(r.to_result() for r in self._loads.values()))

    def _iter_active(self) -> Iterable[PendingLoad]:
        for locale in self._locales:
            for module in self._modules:
                yield self._loads[(locale, module)]

    def _reconcile(self) -> None:
        """Start loads for pairs lacking a record, then notify subscribers."""
        for locale in self._locales:
            for module in self._modules:
                if (locale, module) not in self._loads:
                    self._start_load(locale, module)
        self._start_deferred(tuple(self._iter_active()))
        for handler in tuple(self._subscriptions):
            handler(self._locales, self._modules)

    def _start_load(self, locale: LocaleCode, module: ModuleName) -> None:
        record = PendingLoad(locale=locale, module=module)
        record.source_path = self._describe_path(locale, module)
        self._loads[(locale, module)] = record

        try:
            result = self._loader(locale, module)
        except Exception as error:  # pylint: disable=broad-exception-caught
            # Loader is caller code; any failure becomes an empty resource
            self._settle_failure(record, error)
        else:
            if inspect.isawaitable(result):
                record.deferred = result
            else:
                self._settle(record, result)

        try:
            notifier = self._notify(locale, module, record.future)
        except Exception as error:  # pylint: disable=broad-exception-caught
            logger.warning(
                "Notify hook failed: locale=%s module=%s: %s: %s",
                locale,
                module,
                type(error).__name__,
                error,
            )
            notifier = _silent_notifier
        self._notifiers[(locale, module)] = notifier

    def _describe_path(self, locale: LocaleCode, module: ModuleName) -> str | None:
        describe_path = getattr(self._loader, "describe_path", None)
        if not callable(describe_path):
            return None
        try:
            return describe_path(locale, module)
        except Exception as error:  # pylint: disable=broad-exception-caught
            logger.warning(
                "describe_path failed: locale=%s module=%s: %s: %s",
                locale,
                module,
                type(error).__name__,
                error,
            )
            return None

    def _start_deferred(self, records: Iterable[PendingLoad]) -> None:
        """Schedule awaitable loader results on the running loop, if there is one.

        Awaitables produced outside a loop stay LOADING until the next
        wait() or set_* call made from inside a loop.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        for record in records:
            if record.deferred is None:
                continue
            awaitable, record.deferred = record.deferred, None
            record.task = loop.create_task(self._settle_async(record, awaitable))

    async def _settle_async(self, record: PendingLoad, awaitable: Awaitable[Any]) -> None:
        try:
            result = await awaitable
        except asyncio.CancelledError:
            msg = "Resource load was cancelled"
            self._settle_failure(
                record, LoadFailureError(msg, locale=record.locale, module=record.module)
            )
            raise
        except Exception as error:  # pylint: disable=broad-exception-caught
            self._settle_failure(record, error)
        else:
            self._settle(record, result)

    def _settle(self, record: PendingLoad, result: Any) -> None:
        try:
            resource = validate_resource(result)
        except Exception as error:  # pylint: disable=broad-exception-caught
            self._settle_failure(record, error)
            return
        record.status = LoadStatus.SUCCESS
        record.future.set_result(resource)
        logger.debug("Loaded resource: locale=%s module=%s", record.locale, record.module)

    def _settle_failure(self, record: PendingLoad, error: Exception) -> None:
        record.error = error
        if isinstance(error, FileNotFoundError):
            record.status = LoadStatus.NOT_FOUND
            logger.info(
                "Resource not found: locale=%s module=%s (%s)",
                record.locale,
                record.module,
                error,
            )
        else:
            record.status = LoadStatus.ERROR
            logger.warning(
                "Resource load error: locale=%s module=%s: %s: %s",
                record.locale,
                record.module,
                type(error).__name__,
                error,
            )
        record.future.set_result(EMPTY_RESOURCE)
