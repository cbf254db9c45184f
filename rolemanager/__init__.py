"""Role Manager - admin surface for host platform roles and capabilities."""

__version__ = "2.1.0"
