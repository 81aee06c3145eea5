"""Quill CLI commands."""
