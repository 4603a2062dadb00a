"""docserver - serve generated documentation for a set of git projects"""

__version__ = "0.1.0"
