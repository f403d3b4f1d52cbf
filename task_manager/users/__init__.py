"""
Task Manager API - Users Module

Signup, login/logout with per-user bearer sessions, profile and avatar.
"""
