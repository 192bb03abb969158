"""Church Attendance package.

This package is organized by feature modules (attendance, locations, devices,
schedules, members) with a thin Flask controller layer over service and
repository layers.
"""
