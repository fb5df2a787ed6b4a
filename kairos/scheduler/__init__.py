"""Scheduled events — models, the event ledger, the firing loop and execution."""
