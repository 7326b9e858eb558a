"""
Voice2Action - citizen issue reporting, tracking and budget simulation.
"""
