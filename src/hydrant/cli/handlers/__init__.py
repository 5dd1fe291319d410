from .hydrate import handle_hydrate

__all__ = ["handle_hydrate"]
