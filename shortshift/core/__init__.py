"""Shared protocols, dependencies and helpers."""
