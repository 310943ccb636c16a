"""daylog: internal day-based time tracking.

Employees log half or full days against projects (capped at one day per
calendar date), admins review raw logs and rollups, and new entries are
mirrored to a spreadsheet. The package is organised by feature module
(users, projects, entries, reports) with a thin Flask controller layer over
service and store layers.
"""
