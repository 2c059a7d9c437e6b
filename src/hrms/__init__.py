"""HRMS backend package.

Organized by feature modules (employees, attendance, leaves, payroll, ...)
with a thin Flask controller layer over service and repository layers.
"""

from .main import create_app

__all__ = ["create_app"]
