"""Payments app package.

Creates Xendit invoices for pending bookings and applies Xendit's
asynchronous payment notifications back onto the booking ledger.
"""
