"""Tools for distributed-systems experiments: value encoding, linearizability checking and MapReduce building blocks."""

__version__ = "0.1.0"