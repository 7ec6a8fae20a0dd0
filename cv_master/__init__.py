"""CV Master ATS - resume review and ATS optimization."""

__version__ = "0.1.0"
