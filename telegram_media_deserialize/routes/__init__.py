from .deserialize import deserialize_router

__all__ = ["deserialize_router"]
