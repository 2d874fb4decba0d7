"""Gallery server: a small REST service for uploading, listing, replacing
and deleting PDF and image files kept in a server-local directory."""

__version__ = "0.1.0"
