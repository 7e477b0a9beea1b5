"""Shared schemas and exceptions."""
