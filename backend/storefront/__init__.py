"""
Storefront backend: catalog, cart, orders and sales reports
"""
__version__ = "1.0.0"
