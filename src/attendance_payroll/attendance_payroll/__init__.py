"""Attendance & payroll package.

Organized by feature modules (attendance, payroll, advances, leaves, ...)
with a thin Flask controller layer over service/repository layers. Every
repository query is partitioned by tenant (the company subdomain).
"""
