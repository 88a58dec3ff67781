"""Presentation layer: service wiring and the operator CLI."""
