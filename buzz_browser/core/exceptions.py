class BuzzBrowserError(Exception):
    """Base exception for all buzz_browser errors"""
    pass

class ConfigError(BuzzBrowserError):
    """Invalid or inconsistent settings file or environment override"""
    pass

class SnapshotError(BuzzBrowserError):
    """
    Persisted snapshot can't be turned back into store state
    unreadable bytes, bad JSON, wrong shape, unknown schema version
    """
    pass
