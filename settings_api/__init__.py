# App Settings API
# ================
"""FastAPI service exposing the settings page and save endpoint."""
