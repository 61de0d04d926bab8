"""Shared utilities: errors, logging, request context."""
