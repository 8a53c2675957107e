"""Core services shared by the CLI and the interactive session.

This package holds XDG paths, settings persistence, theming, logging
setup and manifest export.
"""
