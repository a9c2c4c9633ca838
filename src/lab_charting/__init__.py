"""
Lab Charting Engine

Reads lab-report PDFs from mail threads, extracts their values, matches
them to registry patients and merges them into per-patient charts.
Uncertain matches and new parameters go to a review queue.
"""

__version__ = "0.1.0"
