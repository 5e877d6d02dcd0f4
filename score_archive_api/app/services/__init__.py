"""
Service layer.

Each service encapsulates the business rules for one resource and
runs its store access through ``core.db.run_in_transaction``.  API
handlers call services and never touch the repositories directly.
"""
