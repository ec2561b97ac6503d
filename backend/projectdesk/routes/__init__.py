# Routes package init
"""
Projectdesk Backend — API Routes Package
==========================================

Route Inventory:
    - projects.py: GET    /api/projects                 (list projects)
                   GET    /api/projects/{number}        (single project)
                   POST   /api/projects/create-details  (create with dependencies)
                   PUT    /api/projects/{number}        (update)
                   DELETE /api/projects/{number}        (delete)
                   GET    /api/projects/statuses|services|staff|customers|roles
    - catalog.py:  POST   /api/roles|services|staff|customers/ensure
    - health.py:   GET    /health

Routes stay thin: extract the body or path, call a service with the
request's UnitOfWork, shape the response. Domain exceptions are mapped to
status codes by the handlers registered in main.py.
"""
