"""
API Gateway Service package for the Storefront.

The gateway fronts client requests, providing:
- Round-robin distribution of reads across catalog replicas and of
  purchases across order replicas
- A bounded read cache for book info, invalidated by catalog replicas
  before every write

Structure:
- app.main: FastAPI app, routes and request distribution.
- app.adapters: HTTP clients for the catalog and order replicas.
- app.caching: Bounded cache and the info cache manager.
"""
