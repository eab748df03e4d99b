"""
Taxonomie des erreurs métier.
Chaque erreur porte son code HTTP; la traduction en réponse JSON {"error": ...}
est faite une seule fois par storefront.app_setup.exception_handlers.
"""
from typing import Optional


class StorefrontError(Exception):
    status_code = 500
    public_message = "Erreur interne"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.public_message)
        self.message = message or self.public_message


class AuthenticationError(StorefrontError):
    status_code = 401
    public_message = "Non authentifié"


class AuthorizationError(StorefrontError):
    status_code = 403
    public_message = "Accès interdit"


class ValidationError(StorefrontError):
    status_code = 400
    public_message = "Requête invalide"


class NotFoundError(StorefrontError):
    status_code = 404
    public_message = "Ressource introuvable"


class ConflictError(StorefrontError):
    status_code = 409
    public_message = "Ressource déjà existante"


class PaymentProviderError(StorefrontError):
    """Stripe injoignable ou requête refusée. Le panier n'est jamais modifié dans ce cas."""
    status_code = 502
    public_message = "Le paiement n'a pas pu être initialisé, veuillez réessayer"


class PersistenceError(StorefrontError):
    """Échec Supabase. Le détail est journalisé, jamais renvoyé au client."""
    status_code = 500
    public_message = "Erreur de base de données"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(self.public_message)
        self.detail = detail
