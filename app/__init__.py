"""Congregation portal application package."""
