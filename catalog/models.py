from catalog.infrastructure.models import MetalType  # noqa: F401
