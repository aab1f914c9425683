"""
CleanStation Server Package.

This package contains the web server implementation for the CleanStation
manufacturing workflow: the FastAPI application, its routers, the response
envelope, security dependencies and exception handlers.
"""
