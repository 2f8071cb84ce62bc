"""
Sales app for the pharmacy point of sale.

Creates sales atomically against the stock ledger.
"""
