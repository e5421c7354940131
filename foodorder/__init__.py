"""
                Food Ordering Service

Single-restaurant food ordering backend: menu catalog, customer and
owner accounts, and the order fulfillment pipeline, with a Python
client for the customer and owner views.

Version: 1.0.0
License: MIT
"""

__version__ = "1.0.0"
