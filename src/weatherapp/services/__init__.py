from .weather import WeatherService

__all__ = ["WeatherService"]
