"""
Versioning for glfx. The version number is hard-coded, and read by setup.py.
"""

# Bump before each release.
__version__ = "0.1.0"

version_info = tuple(int(i) if i.isnumeric() else i for i in __version__.split("."))
