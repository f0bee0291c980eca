# Services package init
"""
DogAdopt Backend — Services Layer
===================================

What:  Business logic between routes (HTTP) and repositories (persistence).
How:   Services are built per request by app.dependencies around the
       request's repositories, and raise app.exceptions errors that the
       global handlers render.

Service Inventory:
    - TokenService:     issue/verify signed bearer tokens (PyJWT)
    - AuthService:      register and log in users (bcrypt)
    - AdoptionService:  register, adopt, remove and list dogs
"""
