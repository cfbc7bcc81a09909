"""
Shared utilities for the Storefront services.

This package aggregates common building blocks consumed by all services:

- config: Service configuration via pydantic-settings
- logging: Structured logging with request and trace correlation
- metrics: Prometheus metrics helpers
- tracing: OpenTelemetry tracing config
- errors: Canonical error types and responses
- models: Book and order records
- store: JSON file record store, one per replica
- dispatcher: Round-robin replica selection
- replication: Best-effort write forwarding to the peer replica

Any cross-service logic should live here to avoid import cycles across
service packages. Do not import from service_* packages into shared/.
"""
