"""
Data models for casts and segmentation options.
"""
