"""
Lead capture functions: Make.com webhook relay and Kajabi contact tagging.
"""

__version__ = "1.0.0"
