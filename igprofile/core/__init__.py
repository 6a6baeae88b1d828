"""Lookup pipeline: username rules, provider client, service and export."""
