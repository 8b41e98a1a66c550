"""Payroll System package.

Attendance, leave/overtime approval workflows and semi-monthly payroll
computation. Organized by feature modules (employees, attendance, leave,
requests, payroll) with service/repository layers wired in ``container``.
"""
