"""Shared building blocks for the MX Hub API.

Configuration, request middleware, input validation and the outbound HTTP
helper live here. Feature logic belongs in ``mxhub.services``.
"""
