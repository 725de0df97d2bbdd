"""
Linkvertise key generator: one single-use access key per verified completion.
"""

__version__ = "0.1.0"
