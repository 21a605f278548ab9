"""
Verification scripts, one module per paper. Each exposes TITLE and SECTIONS,
an ordered list of (title, fn) with fn(ledger, verbose=True).
"""
