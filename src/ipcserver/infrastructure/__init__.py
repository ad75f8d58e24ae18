"""Infrastructure layer — sockets, framing, and the wire codec.

This layer depends on stdlib and pydantic.
It must never import from commands, config, or output.
"""
