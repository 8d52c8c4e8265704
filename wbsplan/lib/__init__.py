"""Shared utilities: dates, configuration, schema validation."""
