# Services package init
"""
Postboard Backend: Services Layer
===================================

Service Inventory:
    - PostService:    list/get/create/update/delete on the posts table
    - PreviewService: first comment rows rendered as an HTML page

Services receive the request's session and return plain values (Result for
posts, an HTML string for the preview). They never build HTTP responses.
"""
