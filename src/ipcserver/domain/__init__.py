"""Domain layer — the command/response contract.

This layer depends only on stdlib and pydantic.
It must never import from infrastructure, commands, config, or output.
"""
