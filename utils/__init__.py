"""
Shared helpers: logging setup and provably fair random word derivation
"""
