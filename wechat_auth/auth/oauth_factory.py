"""
OAuth Strategy Factory

Registry of provider strategies keyed by the name used in
``/auth/{provider}``. Strategies are instantiated on first lookup, which is
when their settings are loaded and validated.
"""

import logging
from typing import Dict, NamedTuple, Optional, Type

from wechat_auth.auth.oauth_base import OAuthProvider
from wechat_auth.auth.strategy import WechatStrategy

logger = logging.getLogger(__name__)


class ProviderNotRegisteredError(ValueError):
    """No strategy is registered under the requested name."""


class ProviderConfigurationError(ValueError):
    """A registered strategy could not be created from its settings."""


class ProviderRegistration(NamedTuple):
    strategy_class: Type[OAuthProvider]
    display_name: str


class OAuthProviderFactory:
    """
    Factory for provider strategy instances.

    Lookup failures are split so callers can tell an unknown provider name
    apart from a server-side configuration problem.
    """

    _registry: Dict[str, ProviderRegistration] = {
        "wechat": ProviderRegistration(WechatStrategy, "WeChat")
    }

    # Strategy cache, one instance per name
    _instances: Dict[str, OAuthProvider] = {}

    @classmethod
    def register_provider(
        cls,
        name: str,
        provider_class: Type[OAuthProvider],
        display_name: Optional[str] = None
    ) -> None:
        """
        Register a strategy class under a name.

        Args:
            name: Name used in request paths
            provider_class: OAuthProvider subclass, instantiated without arguments
            display_name: Label for provider listings, the capitalized name when omitted

        Raises:
            ValueError: If the name is already taken
        """
        if name in cls._registry:
            raise ValueError(f"Provider {name} is already registered")

        cls._registry[name] = ProviderRegistration(provider_class, display_name or name.capitalize())
        logger.info(f"Registered OAuth provider: {name}")

    @classmethod
    def unregister_provider(cls, name: str) -> None:
        cls._registry.pop(name, None)
        cls._instances.pop(name, None)

    @classmethod
    def is_registered(cls, name: str) -> bool:
        return name in cls._registry

    @classmethod
    def get_provider(cls, name: str) -> OAuthProvider:
        """
        Return the cached strategy for a name, creating it on first use.

        Raises:
            ProviderNotRegisteredError: If the name is unknown
            ProviderConfigurationError: If the strategy's settings are invalid
        """
        registration = cls._registry.get(name)
        if registration is None:
            logger.warning(f"No provider registered with name: {name}")
            raise ProviderNotRegisteredError(f"No provider registered with name: {name}")

        if name not in cls._instances:
            try:
                cls._instances[name] = registration.strategy_class()
            except Exception as e:
                logger.error(f"Failed to create provider {name}: {str(e)}")
                raise ProviderConfigurationError(f"Failed to create provider {name}: {str(e)}") from e
            logger.debug(f"Created new provider instance: {name}")

        return cls._instances[name]

    @classmethod
    def clear_instances(cls) -> None:
        """Drop cached instances so the next lookup picks up new settings."""
        cls._instances.clear()

    @classmethod
    def get_available_providers(cls) -> Dict[str, str]:
        """Map registered provider names to their display names."""
        return {
            name: registration.display_name
            for name, registration in cls._registry.items()
        }
