"""
Data model and title parsing for feed items.
"""
