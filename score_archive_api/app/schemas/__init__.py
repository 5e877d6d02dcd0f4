"""
Pydantic schema definitions for API payloads.

Scores, books and page locations each define their own request and
response models.  Schemas are separated from the SQL tables so that
the API representation (camelCase, sets as lists) stays independent
of how the repositories store them.
"""
