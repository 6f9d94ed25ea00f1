"""Exception resolution policy: map a raised error to a status and a named view."""

from __future__ import annotations

from collections.abc import Iterable
from collections.abc import Iterator
from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field
from datetime import datetime
from datetime import timezone
from typing import Any
from typing import TypeVar
import logging

from fastapi import status

logger = logging.getLogger(__name__)

DEFAULT_EXCEPTION_ATTRIBUTE = "exception"
DATABASE_ERROR_VIEW = "databaseError"
SUPPORT_VIEW = "support"

DATABASE_ERROR_KINDS = frozenset({"SQLException", "DataAccessException"})
RICH_CONTEXT_KINDS = frozenset({"CustomException"})

ExceptionType = TypeVar("ExceptionType", bound=type[BaseException])


@dataclass(frozen=True)
class StatusDeclaration:
    """Fixed HTTP status (and optional reason) bound to an exception class."""

    status: int
    reason: str | None = None


_STATUS_DECLARATIONS: dict[type[BaseException], StatusDeclaration] = {}


def declare_status(exc_type: type[BaseException], status_code: int, reason: str | None = None) -> None:
    """Bind an exception class to a fixed HTTP status."""
    _STATUS_DECLARATIONS[exc_type] = StatusDeclaration(status=status_code, reason=reason)


def response_status(status_code: int, reason: str | None = None):
    """Class decorator declaring that an exception always means ``status_code``."""

    def decorator(exc_type: ExceptionType) -> ExceptionType:
        declare_status(exc_type, status_code, reason)
        return exc_type

    return decorator


def find_status_declaration(exc_type: type[BaseException]) -> StatusDeclaration | None:
    """Return the declaration of ``exc_type`` or of its nearest declared base class."""
    for klass in exc_type.__mro__:
        declaration = _STATUS_DECLARATIONS.get(klass)
        if declaration is not None:
            return declaration
    return None


@dataclass(frozen=True)
class ErrorRecord:
    """One failure raised while handling a request."""

    error_type: str
    message: str
    request_path: str
    status_override: StatusDeclaration | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    kinds: tuple[str, ...] = ()
    exception: BaseException | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if not self.kinds:
            object.__setattr__(self, "kinds", (self.error_type,))

    @classmethod
    def from_exception(cls, exc: BaseException, request_path: str) -> ErrorRecord:
        """Capture ``exc`` as raised on ``request_path``."""
        exc_type = type(exc)
        return cls(
            error_type=exc_type.__name__,
            message=str(exc),
            request_path=request_path,
            status_override=find_status_declaration(exc_type),
            kinds=tuple(klass.__name__ for klass in exc_type.__mro__ if issubclass(klass, BaseException)),
            exception=exc,
        )

    def is_kind(self, names: Iterable[str]) -> bool:
        """True when the error class, or one of its bases, is named in ``names``."""
        wanted = set(names)
        return any(kind in wanted for kind in self.kinds)


class MappingTable(Mapping[str, str]):
    """Read-only mapping of exception class name to view name."""

    def __init__(self, entries: Mapping[str, str] | Iterable[tuple[str, str]] = ()) -> None:
        items = entries.items() if isinstance(entries, Mapping) else entries
        table: dict[str, str] = {}
        for error_type, view_name in items:
            table[error_type.strip()] = view_name.strip()
        self._entries = table

    @classmethod
    def from_string(cls, raw: str) -> MappingTable:
        """Parse ``"DatabaseException=databaseError,Other=view"``."""
        pairs: list[tuple[str, str]] = []
        for chunk in raw.split(","):
            if not chunk.strip():
                continue
            error_type, sep, view_name = chunk.partition("=")
            if not sep or not error_type.strip() or not view_name.strip():
                raise ValueError(f"Invalid exception mapping entry: {chunk.strip()!r}")
            pairs.append((error_type, view_name))
        return cls(pairs)

    def __getitem__(self, error_type: str) -> str:
        return self._entries[error_type]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"MappingTable({self._entries!r})"


class ResolverState:
    """Process-wide switch for the table-driven resolver.

    A state that is not ``switchable`` keeps its initial value: ``off`` when
    no table resolver exists, ``on`` when it is always active. Concurrent
    toggles race on a single boolean; a request resolved during a toggle sees
    either value.
    """

    def __init__(self, enabled: bool = False, *, switchable: bool = True) -> None:
        self.enabled = enabled
        self.switchable = switchable

    def get(self) -> bool:
        return self.enabled

    def set(self, enabled: bool) -> None:
        if self.switchable:
            self.enabled = enabled

    @property
    def switch_state(self) -> str:
        return "on" if self.enabled else "off"


@dataclass(frozen=True)
class ResolutionResult:
    """Outcome of resolving one error record."""

    handled: bool
    status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    view_name: str = ""
    reason: str | None = None
    diagnostics: dict[str, Any] = field(default_factory=dict)


UNHANDLED = ResolutionResult(handled=False)


def resolve(
    error: ErrorRecord,
    state: ResolverState,
    table: Mapping[str, str],
    *,
    exception_attribute: str = DEFAULT_EXCEPTION_ATTRIBUTE,
) -> ResolutionResult:
    """Decide status, view and model attributes for ``error``.

    Status declarations win over everything else. Database failures and
    custom errors have fixed views. The mapping table is consulted last and
    only while ``state`` is enabled; anything left is reported as unhandled
    so the caller can show its default error page.
    """
    declaration = error.status_override
    if declaration is not None:
        _log_handled(error, f"status {declaration.status}")
        return ResolutionResult(handled=True, status=declaration.status, reason=declaration.reason)

    if error.is_kind(DATABASE_ERROR_KINDS):
        _log_handled(error, DATABASE_ERROR_VIEW)
        return ResolutionResult(handled=True, view_name=DATABASE_ERROR_VIEW)

    if error.is_kind(RICH_CONTEXT_KINDS):
        _log_handled(error, SUPPORT_VIEW)
        return ResolutionResult(
            handled=True,
            view_name=SUPPORT_VIEW,
            diagnostics={
                "exception": error,
                "url": error.request_path,
                "timestamp": error.timestamp,
            },
        )

    if not state.get():
        return UNHANDLED

    view_name = table.get(error.error_type)
    if view_name is None:
        return UNHANDLED

    _log_handled(error, view_name)
    return ResolutionResult(handled=True, view_name=view_name, diagnostics={exception_attribute: error})


def set_enabled(state: ResolverState, action: bool | str) -> bool:
    """Switch the table resolver; any string other than ``on`` (any case) disables it.

    Returns the resulting state, which stays unchanged when ``state`` is not switchable.
    """
    if isinstance(action, str):
        enabled = action.strip().lower() == "on"
    else:
        enabled = bool(action)
    if not state.switchable:
        logger.info("Exception mapping resolver is not switchable, staying %s", state.switch_state)
        return state.get()
    state.set(enabled)
    logger.info("Exception mapping resolver is %s", state.switch_state)
    return state.get()


def _log_handled(error: ErrorRecord, outcome: str) -> None:
    logger.error("Request: %s raised %s (%s)", error.request_path, error.error_type, outcome)
