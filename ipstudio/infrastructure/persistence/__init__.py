"""Persistence adapters for the submission store."""
