"""
API endpoint modules for MockPrep
"""

from mockprep.api.endpoints import feedback, health, interview

__all__ = ["feedback", "health", "interview"]
