"""Shared application interfaces (CQRS base classes)."""
