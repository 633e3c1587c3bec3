"""
Local helpers that prepare inputs for the Veracode API clients.
"""
