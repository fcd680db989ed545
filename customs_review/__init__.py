"""
Customs Review Service.

Background review of customs export declarations for the cross-border
e-commerce training platform.
"""

__version__ = "1.0.0"
