"""
Resourceful — Package Initializer
===================================

RESTful resource dispatch for FastAPI/Starlette applications.

Layers:

    ┌─────────────────────────────────────┐
    │     Routes (FastAPI bridge)         │  ← resource_router(), create_app()
    ├─────────────────────────────────────┤
    │     REST Dispatcher                 │  ← RestController, transition table
    ├─────────────────────────────────────┤
    │     HTTP Adapters                   │  ← RequestAdapter, ResponseAdapter
    ├─────────────────────────────────────┤
    │     Schemas & Config                │  ← DispatcherConfig, Settings
    └─────────────────────────────────────┘

The dispatcher never talks to Starlette directly: it sees the request only
through RequestAdapter and writes output only through ResponseAdapter.
"""

__version__ = "1.0.0"
