from .base import WeatherAdapter, WeatherAdapterError
from .open_meteo import OpenMeteoWeatherAdapter

__all__ = ["WeatherAdapter", "WeatherAdapterError", "OpenMeteoWeatherAdapter"]
