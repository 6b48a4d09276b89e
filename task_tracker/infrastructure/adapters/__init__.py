"""Infrastructure adapters implementing the application ports."""

__all__: list[str] = []
