"""XTermux backend: REST API for the XTermux toolbox front end."""

__version__ = "1.0.0"
