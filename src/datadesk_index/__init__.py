"""
Refresh the table of published Data Desk notebooks from GitHub.

Visit <https://github.com/data-desk-eco/data-desk-eco.github.io> for more
information.
"""

__version__ = "0.1.0"
