"""server-setup: one-shot provisioning for fresh Debian/Ubuntu servers."""

__version__ = "0.1.0"
