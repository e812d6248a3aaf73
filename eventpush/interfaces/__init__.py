"""Interfaces layer: trigger registry, HTTP receiver and scheduler."""
