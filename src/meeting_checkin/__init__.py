"""Shareholder meeting check-in service.

Organized by feature modules (shareholders, properties, check-in, meetings,
...) with a thin Flask controller layer over service and repository layers.
"""
