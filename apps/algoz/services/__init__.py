"""Service layer package.

Modules are imported directly (``from algoz.services.realtime_hub import ...``)
so importing the package never builds LLM or HTTP clients.
"""
