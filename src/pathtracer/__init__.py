"""A multi-threaded CPU path tracer with a set of preset scenes."""

__version__ = "0.1.0"
