"""
Middleware for request validation and performance monitoring.
"""

from .validation import ValidationMiddleware
from .performance import PerformanceMonitoringMiddleware

__all__ = [
    "ValidationMiddleware",
    "PerformanceMonitoringMiddleware"
]
