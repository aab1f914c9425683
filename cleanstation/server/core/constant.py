"""
Server constants.

Route prefixes shared by the application factory and the routers.
"""

PROJECT_NAME = "CleanStation Workflow Service"
API_VERSION = "v1"
API_STR = "/api"
API_V1_STR = "/api/v1"
APP_VERSION = "1.0.0"
