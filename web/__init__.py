"""
Web layer for the CRM backend.
"""
