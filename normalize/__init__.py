"""
Normalize package: immutable repository records and helpers that build them from raw GitHub payloads.
"""
