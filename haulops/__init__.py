"""HaulOps: schema-tolerant data-access backend for the hauling operations dashboard."""
