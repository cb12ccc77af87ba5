"""
Configuration, persistence and external API clients.
"""
