"""Top-level package for Django configuration.

Holds the settings modules of the housing allocation core, one per
environment (``dev``, ``prod``, ``test``) on top of ``base``.
"""
