"""Attendance reconciliation package.

Organized by feature modules (attendance, leaves, policy, reports, ...) with a thin
Flask controller layer on top of pure services and Protocol-based repositories.
"""
