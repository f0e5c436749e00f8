from friendchat.setup.ioc.container import (
    AppProvider,
    InfrastructureProvider,
    RedisCacheProvider,
    create_container,
)

__all__ = [
    "AppProvider",
    "InfrastructureProvider",
    "RedisCacheProvider",
    "create_container",
]
