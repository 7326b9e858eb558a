"""
Pydantic models for issues, organizations, metrics and budget plans.
"""
