"""
FastAPI routers for all API endpoints.

Each module defines a router for one area of the dashboard (operators,
trucks, dashboard, projects). Routers stay thin: they validate input, call
a service and map its result to a response model.
"""
