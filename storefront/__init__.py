"""
Backend de la boutique en ligne (catalogue, panier, checkout Stripe, commandes, back-office).
"""

__version__ = "0.1.0"
