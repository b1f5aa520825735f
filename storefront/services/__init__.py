"""Storefront services: product catalog client and money helpers."""
