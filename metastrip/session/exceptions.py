class PersistenceError(Exception):
    """Raised by a session store backend when durable I/O fails."""
