"""
Order service package for the Storefront.

Each order replica keeps its own order store and id sequence. Purchases read
and decrement stock on one catalog replica chosen round-robin, record the
order locally and push the finished order once to the peer replica.

Structure:
- app.main: FastAPI app, purchase path and replicated-order receiver.
- app.sequence: order id counter kept ahead of replicated ids.
- app.adapters: HTTP client for the catalog service.
"""
