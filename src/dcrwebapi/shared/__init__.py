"""Shared domain models used by every layer."""
