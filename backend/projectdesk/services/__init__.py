# Services package init
"""
Projectdesk Backend — Services Layer
======================================

What:  Business logic between the routes (HTTP) and the repositories.
How:   Write operations receive the request's UnitOfWork and own or join its
       transaction (see services.ensure); read operations open their own
       short-lived sessions.

Service Inventory:
    - ensure:            owned_transaction() and the generic EnsureOrCreate
    - RoleService:       ensure/get/list roles
    - ServiceCatalog:    ensure (upsert price)/list services
    - StaffService:      ensure staff (role first)/list staff
    - CustomerService:   ensure/create/list customers
    - ProjectService:    detailed create, update, delete, project read paths
"""
