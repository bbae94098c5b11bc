"""Domain layer: identifiers, validation rules, error codes, scoring.

This layer depends only on the stdlib.
It must never import from services, infrastructure, commands, or config.
"""
