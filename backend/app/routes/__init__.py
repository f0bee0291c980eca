# Routes package init
"""
DogAdopt Backend — API Routes Package
=======================================

What:  HTTP route handlers that accept requests and return responses.
How:   Each route module handles one resource.

Route Inventory:
    - auth.py:    POST /api/auth/register, POST /api/auth/login
    - dogs.py:    /api/dogs (list, register, adopt, remove, my listings)
    - health.py:  GET  /health, GET /

Routes stay THIN: extract request data, resolve the caller, call a
service, wrap the result in the envelope. Business rules live in
app.services and app.domain.
"""
