"""Properties app package.

Listings on the island: the property model with its photos and reviews,
and the read-only discovery API (list, filter, detail, price quote).
"""
