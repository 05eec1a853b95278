"""
Utility functions module.

Time Semantics:
- All instants are compared as naive UTC datetimes
- Aware datetimes are converted to UTC at the boundary they enter through
- Serialized timestamps always carry microsecond precision
"""
