"""
CMS publishing and debug output.
"""
