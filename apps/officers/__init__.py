"""Officers app package.

Officer role of an applicant and its per-project registrations.
"""
