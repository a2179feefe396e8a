"""Workforce Hub package.

Organized by feature modules (leave, rooms, attendance, organization, ...)
with a thin Flask controller layer over service/repository layers.
"""
