"""
Sigil - Signing identities derived from a secret phrase.
"""
