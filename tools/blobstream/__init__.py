"""
Command-line access to blob streams.
"""
