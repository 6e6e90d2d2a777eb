"""
Dependency injection container for neo.

Uses dependency-injector providers for DI with support for:
- Value, class, factory and alias providers
- Singleton and transient lifetimes
- Scoped child containers that fall back to their parent
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Optional, TypeVar, Union

from dependency_injector import providers

T = TypeVar("T")


class Token:
    """
    Unique injection key, compared by identity.

    Two Token("Logger") instances are different keys.
    """

    __slots__ = ("description",)

    def __init__(self, description: str = "") -> None:
        self.description = description

    def __repr__(self) -> str:
        return f"Token({self.description!r})"


InjectionToken = Union[str, Token, type]


class Lifetime(str, Enum):
    """How long a resolved value lives."""

    SINGLETON = "singleton"
    TRANSIENT = "transient"


@dataclass(frozen=True)
class UseValue(Generic[T]):
    """Resolve to a fixed value."""

    value: T


@dataclass(frozen=True)
class UseClass(Generic[T]):
    """Resolve by instantiating a class with no arguments."""

    cls: type[T]


@dataclass(frozen=True)
class UseFactory(Generic[T]):
    """Resolve by calling a zero-argument factory."""

    factory: Callable[[], T]


@dataclass(frozen=True)
class UseExisting:
    """Resolve by resolving another token."""

    token: InjectionToken


Provider = Union[UseValue, UseClass, UseFactory, UseExisting]


@dataclass(frozen=True)
class _Registration:
    provider: providers.Provider
    lifetime: Lifetime
    boxed: bool = False

    def get(self) -> Any:
        value = self.provider()
        return value[0] if self.boxed else value


def _boxed(target: Callable[..., Any]) -> Callable[..., tuple[Any]]:
    """Wrap a target so its result is never None."""

    def build(*args: Any) -> tuple[Any]:
        return (target(*args),)

    return build


def describe_token(token: InjectionToken) -> str:
    """Human-readable token name for error messages."""
    if isinstance(token, type):
        return token.__qualname__
    return str(token) if isinstance(token, str) else repr(token)


class Container:
    """
    Dependency injection container for neo.

    Each token maps to one dependency-injector provider. Singleton
    caching lives in that provider, so replacing the registration also
    drops the cached instance.
    """

    def __init__(self, parent: Optional[Container] = None) -> None:
        """Initialize the container with empty registrations."""
        self._registrations: dict[Any, _Registration] = {}
        self._parent = parent

    @property
    def parent(self) -> Optional[Container]:
        return self._parent

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def register(
        self,
        token: InjectionToken,
        provider: Provider,
        lifetime: Lifetime | str = Lifetime.SINGLETON,
    ) -> None:
        """
        Register (or replace) the provider for a token.

        Args:
            token: str, Token or class
            provider: UseValue, UseClass, UseFactory or UseExisting
            lifetime: 'singleton' (default) or 'transient'
        """
        lifetime = Lifetime(lifetime)
        self._registrations[token] = _Registration(
            provider=self._build_provider(provider, lifetime),
            lifetime=lifetime,
            boxed=lifetime is Lifetime.SINGLETON and not isinstance(provider, UseValue),
        )

    def register_value(self, token: InjectionToken, value: Any) -> None:
        """Register a constant value."""
        self.register(token, UseValue(value), Lifetime.SINGLETON)

    def register_class(
        self,
        token: InjectionToken,
        cls: type,
        lifetime: Lifetime | str = Lifetime.SINGLETON,
    ) -> None:
        """Register a class constructor."""
        self.register(token, UseClass(cls), lifetime)

    def register_factory(
        self,
        token: InjectionToken,
        factory: Callable[[], Any],
        lifetime: Lifetime | str = Lifetime.SINGLETON,
    ) -> None:
        """Register a factory function."""
        self.register(token, UseFactory(factory), lifetime)

    def _build_provider(self, provider: Provider, lifetime: Lifetime) -> providers.Provider:
        """Translate a provider declaration into a dependency-injector provider."""
        if isinstance(provider, UseValue):
            # Use Object provider for pre-created instances
            return providers.Object(provider.value)

        if isinstance(provider, UseClass):
            target: Callable[..., Any] = provider.cls
            args: tuple[Any, ...] = ()
        elif isinstance(provider, UseFactory):
            target = provider.factory
            args = ()
        elif isinstance(provider, UseExisting):
            target = self.resolve
            args = (provider.token,)
        else:
            raise TypeError(f"Invalid provider configuration: {provider!r}")

        if lifetime is Lifetime.SINGLETON:
            # Singleton rebuilds while its cached value is None
            return providers.Singleton(_boxed(target), *args)
        return providers.Factory(target, *args)

    # -------------------------------------------------------------------------
    # Resolution
    # -------------------------------------------------------------------------

    def resolve(self, token: InjectionToken) -> Any:
        """
        Resolve a token.

        Args:
            token: The token to resolve

        Returns:
            The registered value, cached for singletons

        Raises:
            KeyError: If neither this container nor any ancestor knows the token
        """
        registration = self._registrations.get(token)
        if registration is None:
            if self._parent is not None:
                return self._parent.resolve(token)
            raise KeyError(f"No provider registered for: {describe_token(token)}")
        return registration.get()

    def try_resolve(self, token: InjectionToken) -> Any | None:
        """
        Try to resolve a token, returning None if it is not registered.

        Args:
            token: The token to resolve

        Returns:
            The registered value, or None
        """
        if not self.has(token):
            return None
        return self.resolve(token)

    def has(self, token: InjectionToken) -> bool:
        """Whether this container or an ancestor can resolve the token."""
        if token in self._registrations:
            return True
        return self._parent.has(token) if self._parent is not None else False

    def lifetime_of(self, token: InjectionToken) -> Lifetime | None:
        """Lifetime of the registration that would serve the token."""
        registration = self._registrations.get(token)
        if registration is not None:
            return registration.lifetime
        return self._parent.lifetime_of(token) if self._parent is not None else None

    # -------------------------------------------------------------------------
    # Scoping and lifecycle
    # -------------------------------------------------------------------------

    def create_scope(self) -> Container:
        """
        Create a child container.

        The child sees every parent registration until it registers the
        same token itself; its registrations never reach the parent.
        """
        return Container(parent=self)

    def clear(self) -> None:
        """Drop all registrations and cached instances of this container only."""
        self._registrations.clear()

    @property
    def size(self) -> int:
        """Number of registrations held directly by this container."""
        return len(self._registrations)

    def __len__(self) -> int:
        return self.size

    def __contains__(self, token: object) -> bool:
        return self.has(token)  # type: ignore[arg-type]


class Tokens:
    """Well-known injection tokens."""

    LOGGER = Token("Logger")
    CONFIG = Token("Config")
    SETTINGS = Token("Settings")
    EVENT_BUS = Token("EventBus")
    COMMAND_REGISTRY = Token("CommandRegistry")
    PLUGIN_LOADER = Token("PluginLoader")
    PLUGIN_REGISTRY = Token("PluginRegistry")
    ERROR_HANDLER = Token("ErrorHandler")
    PRESENTER = Token("Presenter")
    VERSION = Token("Version")
