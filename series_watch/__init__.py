"""Discover series on a partitioned listing and report additions and removals."""

__version__ = "0.1.0"
