"""
Task Manager API

REST backend for per-user task lists: accounts, bearer sessions,
owner-scoped task CRUD and account notification emails.
"""

__version__ = "0.1.0"
