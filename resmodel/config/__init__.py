# Configuration
from .options import ReadingOptions

__all__ = ['ReadingOptions']
