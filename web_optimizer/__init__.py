"""Batch optimizer for web images, SVGs and videos."""

__version__ = '0.1.0'
