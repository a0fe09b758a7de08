from .routes import labels_bp

__all__ = ["labels_bp"]
