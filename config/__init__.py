"""
Django project configuration for the Farma point-of-sale backend.
"""
