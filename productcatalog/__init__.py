"""Product catalog service: in-memory catalog loaded from a file or AlloyDB."""

__version__ = "1.0.0"
