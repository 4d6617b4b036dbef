"""Export Bitwarden vault items and their attachments to local disk."""

__version__ = "0.1.0"
