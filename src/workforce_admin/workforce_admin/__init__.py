"""Workforce admin package.

Feature modules (profiles, timesheets, payroll, banking, ...) each carry a
thin Flask controller on top of service and MySQL repository layers.
"""
