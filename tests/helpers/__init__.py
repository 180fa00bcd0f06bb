"""Test helper modules for the ibiblio resolver test suite.

- fakes: in-memory settings store, transport and not-found logger
"""
