"""Weather forecast core: snapshot model, condition codes, freshness and unit display."""

__version__ = "0.1.0"
