"""
HTTP routes. Each module owns one APIRouter; main.py includes them all.
"""
