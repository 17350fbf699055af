"""
Logging and metrics for the enrichment pipeline.
"""
