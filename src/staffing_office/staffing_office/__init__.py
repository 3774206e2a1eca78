"""Staffing back office.

Feature modules (shifts, scheduling, attendance, payroll) each hold a model,
a repository protocol, a service and a MySQL repository, with a thin Flask
controller layer on top.
"""
