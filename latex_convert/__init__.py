"""LaTeX-to-PDF compile proxy in front of an external LaTeX compiler."""

__version__ = "1.0.0"
