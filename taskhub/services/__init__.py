"""Domain services: stores, authorization gate and webhook ingest."""
