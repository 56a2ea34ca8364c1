from .service import LocationService

__all__ = ["LocationService"]
