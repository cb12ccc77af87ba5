"""
Feed sources.
"""
