"""Webhook request verification and dispatch."""
