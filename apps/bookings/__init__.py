"""Bookings app package.

Holds the booking lifecycle: availability and pricing rules, the booking
ledger that owns every state change, and the HTTP endpoints that create
bookings and report their status. Date overlaps are prevented by
serializing creation per property inside a database transaction.
"""
