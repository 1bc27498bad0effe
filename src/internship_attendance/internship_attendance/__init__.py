"""Internship Attendance package.

This package is organized by feature modules (geo, schedules, location,
timesheets, reports, ...) with a thin Flask controller layer and
service/repository layers underneath.
"""
