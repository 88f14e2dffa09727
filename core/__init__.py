"""Shared helpers for the server and the terminal client."""
