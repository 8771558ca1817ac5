# Middleware package init
"""
Postboard Backend: Middleware Package
=======================================

Root application chain (outermost first):
    Request -> [Request ID] -> [Logging] -> [CORS] -> router

API application chain (mounted at /api):
    -> [Error Envelope] -> [API Key] -> router

Request ID runs first so every later log line, including the access line
and authentication rejections, carries the id. The API key check sits in
front of the API router so rejected requests never reach routing or storage.
"""
