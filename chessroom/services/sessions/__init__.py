"""Session domain services: rules, roles and timers.

This package contains the pieces the coordinator composes. Only the
transport module knows about Socket.IO.
"""
