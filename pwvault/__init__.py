"""Password vault program: instruction decoding, account state, an in-memory runtime and processing."""

__version__ = "0.1.0"

__all__ = ["errors", "state", "instructions", "runtime", "processor"]