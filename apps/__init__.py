"""
Django apps of the Farma point-of-sale backend.
"""
