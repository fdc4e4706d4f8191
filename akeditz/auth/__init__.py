"""
Module 'auth': session explicite, persistance du token, cas d'usage login/register/logout.
"""
