"""Kida environment setup for page evaluation."""

from perch.templating.integration import create_environment, render_source

__all__ = ["create_environment", "render_source"]
