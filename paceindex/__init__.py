"""
Pace Index Calculator
Pace index table builder and training pace calculator
"""
from .config import APP_NAME, APP_VERSION

__version__ = APP_VERSION
