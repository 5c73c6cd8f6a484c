"""Shared primitives for HWSC services."""
