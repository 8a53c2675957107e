"""Interactive terminal session.

This package holds the session state machine, its screens, raw key input
and the runtime that ties them to the scan coordinator.
"""
