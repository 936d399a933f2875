"""
HKSave - Hollow Knight save editor with a synchronized hex view.
"""

__version__ = '0.1.0'
