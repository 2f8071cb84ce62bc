"""
Inventory app for pharmacy stock management.

Owns the product catalog rows and the stock ledger that sales and purchase
receipts go through.
"""
