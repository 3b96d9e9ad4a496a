from datetime import date
from typing import Any, Dict, List, Optional, Type

from ..utils.http import HttpClient
from .base import AdapterSettings, BaseAdapter

# Populated by @register_adapter; insertion order is the adapter-iteration order
ADAPTER_REGISTRY: Dict[str, Type[BaseAdapter]] = {}


def register_adapter(name: str):
    """Decorator to register an adapter class."""

    def decorator(cls: Type[BaseAdapter]):
        cls.SOURCE_KEY = name
        ADAPTER_REGISTRY[name] = cls
        return cls

    return decorator


def get_adapter(
    source_name: str,
    client: HttpClient,
    settings: Optional[AdapterSettings] = None,
    today: Optional[date] = None,
) -> BaseAdapter:
    """Factory function to create adapter instances."""
    adapter_class = ADAPTER_REGISTRY.get(source_name)
    if not adapter_class:
        raise ValueError(f"Unknown source: {source_name}. Available: {list(ADAPTER_REGISTRY.keys())}")
    return adapter_class(client, settings, today)


def list_available_adapters() -> list:
    """Return list of registered adapter names."""
    return list(ADAPTER_REGISTRY.keys())


def build_adapters(
    config: Dict[str, Any],
    client: HttpClient,
    only: Optional[str] = None,
) -> List[BaseAdapter]:
    """
    Instantiate the enabled adapters in registry order.

    Args:
        config: Full application config
        client: Shared HTTP client
        only: Restrict to a single adapter key

    Returns:
        Adapters in deterministic iteration order
    """
    settings = AdapterSettings.from_config(config)
    enabled = config.get("agencies", {}).get("enabled") or list_available_adapters()
    unknown = [name for name in enabled if name not in ADAPTER_REGISTRY]
    if unknown:
        raise ValueError(f"Unknown sources in config: {unknown}. Available: {list_available_adapters()}")
    if only:
        if only not in ADAPTER_REGISTRY:
            raise ValueError(f"Unknown source: {only}. Available: {list_available_adapters()}")
        enabled = [only]
    return [
        get_adapter(name, client, settings)
        for name in list_available_adapters()
        if name in enabled
    ]


# Import adapters to register them, in the order agencies are aggregated
from . import gruno  # noqa: E402,F401
from . import vandermeulen  # noqa: E402,F401
from . import rotsvast  # noqa: E402,F401
from . import nova  # noqa: E402,F401
from . import dcwonen  # noqa: E402,F401
from . import wonen123  # noqa: E402,F401
from . import mvgm  # noqa: E402,F401
from . import kpmakelaars  # noqa: E402,F401
from . import expatgroningen  # noqa: E402,F401

__all__ = [
    "AdapterSettings",
    "BaseAdapter",
    "ADAPTER_REGISTRY",
    "build_adapters",
    "get_adapter",
    "list_available_adapters",
    "register_adapter",
]
