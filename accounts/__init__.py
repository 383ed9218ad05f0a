"""
Accounts app - users bound to an activation, and password hashing.
"""
