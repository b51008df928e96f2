"""HOC FastAPI Server"""
from .client import HocClient

__all__ = ['HocClient']
