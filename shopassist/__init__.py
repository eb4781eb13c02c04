"""
ShopAssist - storefront assistant tool layer
"""
__version__ = "1.0.0"
