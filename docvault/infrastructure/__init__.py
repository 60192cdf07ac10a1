"""Infrastructure: persistence, search strategies, security, collaborators."""
