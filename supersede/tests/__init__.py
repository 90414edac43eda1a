"""
Test suite for supersede.

Focus areas:
- Supersession of values and exceptions
- Issuance order versus settlement order
- Instance isolation and thread safety
- Caller-side instrumentation
"""
