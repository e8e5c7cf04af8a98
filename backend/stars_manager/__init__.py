"""GitHub Stars Manager backend."""
