"""
Store catalogue and ratings.

Responsibilities:
- Define the wire models shared by the HTTP API and the client.
- Load the seed store catalogue.
- Keep per-user store ratings and compute averages.
"""
