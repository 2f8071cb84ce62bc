"""
Procurement app: suppliers and purchase orders that credit stock on receipt.
"""
