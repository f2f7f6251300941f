"""Example scripts for harvester.

This package demonstrates framework usage but is not part of the core API.
"""
