"""
odf-spine: optical distribution frame records service.

Stores frame entries (one per region/subregion) and their ports, normalizes
schema-drifted records into one canonical shape, keeps entries in step with
each region's subregion roster, and searches everything by keyword.

Packages:
    core     errors, logging, settings, SQLite access layer
    frames   normalization, custom fields, roster reconciliation, search
    storage  memory, JSON file and SQLite frame stores
    ops      operations returning OperationResult envelopes
    api      FastAPI transport
    cli      typer command line
"""

__version__ = "0.1.0"
