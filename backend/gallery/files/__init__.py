"""File upload and storage module for the gallery server.

Uploaded files live as plain entries in a single directory; the directory
listing is the only record of what has been stored. There is no metadata
database.

Supported file types:
- Images: jpg, jpeg, png, gif
- Documents: pdf
"""
