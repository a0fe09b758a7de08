from .routes import catalog_bp

__all__ = ["catalog_bp"]
