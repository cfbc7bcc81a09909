"""
Catalog service package for the Storefront.

Each catalog replica owns a local store of book records. Reads are served
straight from that store. Writes invalidate the gateway cache first, then
persist locally, then forward once to the peer replica.

Structure:
- app.main: FastAPI app, routes and the update/replication path.
- app.adapters: HTTP client for gateway cache invalidation.
"""
