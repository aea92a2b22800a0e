"""TCP client and server exchanging length-prefixed messages and packages."""

__version__ = "0.1.0"
__all__ = ["protocol", "client", "server"]