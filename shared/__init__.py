"""
Shared Kernel

Base classes and utilities shared across the booking and payment contexts:
domain building blocks, the message bus, the Django unit of work and keyed
locks.
"""
