"""AniOrder - chronological release order of anime and manga franchises."""

__version__ = "0.1.0"
