"""FileDrop — drag-and-drop file transfer for your local network."""

__version__ = "1.0.0"
