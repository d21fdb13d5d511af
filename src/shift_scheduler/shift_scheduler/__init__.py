"""Shift Scheduler package.

This package is organized by feature modules (users, requests, shifts,
calendar) with a thin Flask controller layer over service and repository
layers. All persistence goes through a remote table-oriented HTTP API.
"""
from __future__ import annotations

from .container import Container, build_container, wire_container

__all__ = ["Container", "build_container", "wire_container"]
