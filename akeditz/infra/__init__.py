"""Infrastructure: client HTTP et erreurs normalisées."""
