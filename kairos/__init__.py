"""Kairos — a chat assistant that can act now or schedule work for later."""
