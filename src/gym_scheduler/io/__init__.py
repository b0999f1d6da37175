"""Workspace storage and serialization."""
