"""
messhub - Meal-ordering backend for customers, mess owners and administrators.
"""

__version__ = "1.0.0"
