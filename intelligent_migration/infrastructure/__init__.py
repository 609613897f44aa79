"""Infrastructure adapters: CSV input, corpus and schema storage, logging."""

from .container import DependencyContainer, create_default_container

__all__ = [
    "DependencyContainer",
    "create_default_container",
]
