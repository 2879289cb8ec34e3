"""Enquiries app package."""
