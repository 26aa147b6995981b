"""Server-rendered todo list driven by htmx fragments."""

__version__ = "0.1.0"
