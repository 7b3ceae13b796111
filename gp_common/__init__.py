"""Shared helpers (logging, errors, env parsing) for gridpick packages."""
