"""CBDA exam simulator web service."""
