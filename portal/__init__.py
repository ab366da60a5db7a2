"""
Realty Media Portal: ordering, tracking and billing for real-estate
marketing services.
"""

__version__ = "1.0.0"
