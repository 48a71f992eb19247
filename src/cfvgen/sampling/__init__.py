"""Situation samplers: boards and ranges."""
