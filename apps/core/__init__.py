"""Wiring of the housing contexts: units of work and the message bus."""
