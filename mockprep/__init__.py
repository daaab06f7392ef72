"""
MockPrep - AI-Powered Mock Interview Backend

Generates interview questions, scores recorded answers with a language
model, and keeps a per-user feedback history with progress analytics.
"""

__version__ = "0.1.0"
__author__ = "MockPrep Team"
