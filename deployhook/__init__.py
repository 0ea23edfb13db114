"""Webhook-triggered deployment service."""

__version__ = "1.0.0"
