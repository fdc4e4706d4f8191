"""
akeditz: client Python du backend AK Editz (marketplace de projets).
"""

__version__ = "1.0.0"
