"""Attendance Marking package.

This package is organized by feature modules (roster, marking, ...) with a
thin Flask controller layer over a framework-free marking engine that talks to
the remote roster service through repository Protocols.
"""
