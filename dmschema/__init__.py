"""dmschema - DM catalog introspection."""

__version__ = "0.1.0"
