"""HR payroll package.

Attendance ledger (clock in/break/clock out) and the monthly payroll engine,
organized by feature modules with a thin Flask controller layer over
service/repository layers.
"""
