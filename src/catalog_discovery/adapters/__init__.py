"""Adapters for catalog storage and report output."""
