"""Clever roster discrepancy reporting.

Fetches a district's roster from the Clever API under two application
credentials, follows cursor pagination with retrying HTTP calls, and reports
students, teachers and schools that only one application can see.
"""
