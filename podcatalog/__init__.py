"""podcatalog: multi-tenant DataSpace / Asset catalog over personal document stores."""

__version__ = "0.1.0"
