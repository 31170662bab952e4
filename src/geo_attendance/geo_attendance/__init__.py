"""Geofenced attendance package.

Organized by feature modules (geo, attendance, departments, offices, cache, ...)
with a thin Flask controller layer over service/repository layers.
"""
