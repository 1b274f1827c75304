# This file MUST NOT contain anything but the __version__ assignment.
# setup.py parses it without importing the package.

__version__ = '0.1.0'
