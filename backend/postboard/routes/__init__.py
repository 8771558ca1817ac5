# Routes package init
"""
Postboard Backend: Routes Package
===================================

Route Inventory:
    - posts.py:    /api/posts and /api/posts/{id} (mounted API application)
    - preview.py:  every other path (HTML comments preview)

Routes stay thin: they pull the session and body, call a service and render
its result. Outcome classification lives in the services.
"""
