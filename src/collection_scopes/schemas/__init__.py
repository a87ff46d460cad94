"""Packaged JSON Schemas for configuration files."""
