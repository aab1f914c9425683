"""Workflow helpers shared by the API routers."""
