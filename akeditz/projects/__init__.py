"""
Module 'projects' (feature-first): catalogue public, administration et accès aux liens achetés.
"""
