"""Report output"""
from .json_formatter import ViolationJSONFormatter

__all__ = ['ViolationJSONFormatter']
