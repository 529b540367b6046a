"""
Command line interface: `analyze` a records file or `compare` against a live index.
"""
