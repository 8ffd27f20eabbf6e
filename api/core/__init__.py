"""
Shared, cross-cutting code for the API.

`core/` holds small building blocks that every feature uses
(DB wiring, env configuration, logging). Feature-specific SQL and business
rules stay in the corresponding feature package (e.g. `delivery/`).
"""
