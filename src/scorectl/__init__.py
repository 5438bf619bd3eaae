"""scorectl — contestant, supervisor, competition and score records."""

__version__ = "0.3.0"
