"""Domain layer — types, rules, and derived values.

This layer depends only on the standard library.
It must never import from services, infrastructure, commands, or config.
"""
