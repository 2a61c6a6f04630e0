"""eswatcher: block until an ExternalSecret reports Ready."""

__version__ = "0.1.0"
