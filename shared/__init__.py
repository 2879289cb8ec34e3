"""
Shared Kernel

This module contains base classes and utilities shared across all housing
contexts: entities, value objects, domain events, exceptions, units of
work and the message bus.
"""
