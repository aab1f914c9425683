"""Server-side configuration, constants, database dependency and security."""
