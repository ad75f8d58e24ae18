"""Example command set: print, add, and push against an in-memory stack."""
