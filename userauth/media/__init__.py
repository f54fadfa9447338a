"""
Media System

Image uploads stored through a swappable blob storage.
"""
