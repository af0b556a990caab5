"""Core domain: interfaces, models and services."""
