"""
Enrichment steps applied to each new feed item.
"""
