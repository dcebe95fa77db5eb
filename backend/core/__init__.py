"""
Core package.

Profile identification algorithms, models, validation and loading.
"""
