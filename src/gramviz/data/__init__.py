"""Bundled datasets (package data)."""
