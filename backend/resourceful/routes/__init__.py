# Routes package init
"""
Resourceful — Routes Package
==============================

What:  The bridge between FastAPI's router and RestController dispatch.

Route Inventory:
    - resource.py:  resource_router() → `path` and `path/{resource_id}`
                    for GET, POST, PUT, PATCH, DELETE

Routes stay thin: build the adapters, construct the controller, dispatch,
and turn the result into a Starlette response. Method/id → action
selection belongs to resourceful.rest.
"""
