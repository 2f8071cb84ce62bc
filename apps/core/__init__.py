"""
Core app: error taxonomy and shared API building blocks.
"""
