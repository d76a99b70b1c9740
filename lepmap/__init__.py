"""
Butterfly occurrence density and elevation report.
"""

__version__ = "0.1.0"
