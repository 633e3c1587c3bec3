"""
Shared HTTP, signing and response-normalization helpers for the API clients.
"""
