"""Identity API package."""

from caviar.identity.api.routes import router

__all__ = ["router"]
