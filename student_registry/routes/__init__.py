# Routes package init
"""
Student Registry — API Routes Package
======================================

Route Inventory:
    - students.py:  /students CRUD and attribute lookups
    - health.py:    GET /health (database connectivity probe)

Routes stay thin: extract path/body values, call StudentService, return the
model. Status codes for failures come from the global exception handlers.
"""
