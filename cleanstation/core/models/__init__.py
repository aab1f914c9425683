"""Domain enums and API input/output schemas."""
