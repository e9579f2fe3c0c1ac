"""
Shared, cross-cutting code for the dashboard API.

`core/` holds small building blocks that several features use
(DB wiring, settings, the view cache). Feature-specific SQL and business
logic stay in the corresponding feature package (e.g. `invoices/`).
"""
