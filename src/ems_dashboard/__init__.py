"""Employee management dashboard package.

Organized by feature modules (employees, attendance, tasks, auth, reports)
around an in-memory domain store that writes through to MySQL, with a thin
Flask controller layer on top.
"""
