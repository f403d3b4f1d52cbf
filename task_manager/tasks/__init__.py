"""
Task Manager API - Tasks Module

Owner-scoped task CRUD with filtering, sorting and pagination.
"""
