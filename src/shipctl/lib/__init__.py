"""Shared helpers for shipctl."""
