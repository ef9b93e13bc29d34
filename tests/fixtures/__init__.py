"""Shared test doubles and sample configuration."""
