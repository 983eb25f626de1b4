"""
core.domain — service-layer plumbing shared by ``accounts`` and ``reports``.

exceptions         errors services raise
exception_handler  maps those errors to HTTP responses
access             actor guards and permission-scoped querysets
transactions       row locking and partial saves for audited writes
"""
