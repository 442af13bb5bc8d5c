"""Attendance core package.

Feature modules (attendance, anomalies, calendars, timesheet, payroll, ...)
with a thin Flask controller layer over service/repository layers.
"""
