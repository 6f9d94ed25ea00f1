"""Application configuration helpers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
import os

from app.core.resolution import DEFAULT_EXCEPTION_ATTRIBUTE
from app.core.resolution import MappingTable

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_WEB_LOG_LEVEL = "DEBUG"


class Profile(str, Enum):
    """Where the exception handlers are attached."""

    CONTROLLER = "controller"
    GLOBAL = "global"


class ResolverSetup(str, Enum):
    """How the table-driven resolver is set up."""

    NONE = "none"
    STATIC = "static"
    SWITCHABLE = "switchable"


_DEFAULT_MAPPINGS: dict[ResolverSetup, dict[str, str]] = {
    ResolverSetup.NONE: {},
    ResolverSetup.STATIC: {
        "DatabaseException": "databaseError",
        "InvalidCreditCardException": "creditCardError",
    },
    ResolverSetup.SWITCHABLE: {
        "DatabaseException": "databaseException",
        "InvalidCreditCardException": "creditCardError",
    },
}

_DEFAULT_ERROR_VIEWS: dict[ResolverSetup, str] = {
    ResolverSetup.NONE: "error",
    ResolverSetup.STATIC: "error",
    ResolverSetup.SWITCHABLE: "defaultErrorPage",
}


def _get_enum_env(name: str, enum_type: type[Enum], default: Enum) -> Enum:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return enum_type(raw.strip().lower())
    except ValueError as exc:
        allowed = ", ".join(member.value for member in enum_type)
        raise ValueError(f"{name} must be one of: {allowed}") from exc


@dataclass(frozen=True)
class Settings:
    """Runtime settings selecting the exception handling strategy."""

    profile: Profile
    resolver_setup: ResolverSetup
    exception_mappings: MappingTable
    exception_attribute: str
    default_error_view: str
    log_level: str
    web_log_level: str

    @property
    def profiles(self) -> str:
        """Active profile identifier shown on every page, e.g. ``controller, switchable``."""
        return f"{self.profile.value}, {self.resolver_setup.value}"

    @property
    def resolver_initially_enabled(self) -> bool:
        return self.resolver_setup is ResolverSetup.STATIC

    @property
    def resolver_switchable(self) -> bool:
        return self.resolver_setup is ResolverSetup.SWITCHABLE

    def safe_for_logging(self) -> dict[str, str]:
        """Return settings in a log-friendly shape."""
        return {
            "profiles": self.profiles,
            "exception_mappings": ", ".join(f"{key}={value}" for key, value in self.exception_mappings.items()),
            "exception_attribute": self.exception_attribute,
            "default_error_view": self.default_error_view,
        }


def load_settings() -> Settings:
    """Build settings from the current environment."""
    profile = _get_enum_env("EXDEMO_PROFILE", Profile, Profile.CONTROLLER)
    setup = _get_enum_env("EXDEMO_RESOLVER_SETUP", ResolverSetup, ResolverSetup.SWITCHABLE)

    raw_mappings = os.getenv("EXDEMO_EXCEPTION_MAPPINGS")
    if raw_mappings is None or setup is ResolverSetup.NONE:
        mappings = MappingTable(_DEFAULT_MAPPINGS[setup])
    else:
        mappings = MappingTable.from_string(raw_mappings)

    return Settings(
        profile=profile,
        resolver_setup=setup,
        exception_mappings=mappings,
        exception_attribute=os.getenv("EXDEMO_EXCEPTION_ATTRIBUTE", DEFAULT_EXCEPTION_ATTRIBUTE),
        default_error_view=os.getenv("EXDEMO_DEFAULT_ERROR_VIEW", _DEFAULT_ERROR_VIEWS[setup]),
        log_level=os.getenv("EXDEMO_LOG_LEVEL", DEFAULT_LOG_LEVEL),
        web_log_level=os.getenv("EXDEMO_WEB_LOG_LEVEL", DEFAULT_WEB_LOG_LEVEL),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from the environment once per process."""
    return load_settings()
