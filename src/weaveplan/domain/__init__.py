"""Domain layer — matchers, intercept points, witnesses and definitions.

This layer depends only on stdlib.
It must never import from services, infrastructure, commands, or config.
"""
