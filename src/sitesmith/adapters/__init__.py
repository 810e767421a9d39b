"""Integrations with the filesystem, markdown tooling and external programs."""
