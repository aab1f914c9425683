"""Version 1 of the CleanStation HTTP API."""
