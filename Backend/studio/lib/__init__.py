# studio/lib/__init__.py
"""
Shared infrastructure helpers (monitoring, export packaging).
"""
