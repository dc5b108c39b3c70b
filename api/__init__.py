"""
REST API for the document formatter.
"""
