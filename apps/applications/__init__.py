"""Applications app package.

Applicants and the state machine of their single application.
"""
