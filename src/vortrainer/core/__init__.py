"""Core infrastructure: configuration, logging, events and resource paths."""
