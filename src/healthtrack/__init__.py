"""healthtrack: attachment upload protocol for a personal health-record service."""

__version__ = "0.1.0"
