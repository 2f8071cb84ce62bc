"""
CRM app: pharmacy clients and their loyalty points.
"""
