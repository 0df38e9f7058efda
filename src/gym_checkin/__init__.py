"""Gym check-in package.

Feature modules (attendance, gyms) with a thin Flask controller layer over
service/repository layers. The attendance service turns QR scans into
check-in/check-out transitions on attendance sessions.
"""
from __future__ import annotations

__version__ = "0.1.0"
