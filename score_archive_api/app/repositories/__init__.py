"""
Persistence layer.

Repositories wrap the SQL for one aggregate each and operate on a
cursor handed to them by ``core.db.run_in_transaction``, so a service
can combine several repository calls in one transaction.
"""
