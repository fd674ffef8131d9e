"""Core configuration, error types and shared enums."""
