from .stripe_gateway import StripeGateway, PaymentIntentResult, SavedCard
from .identity_provider import IdentityProviderClient, TokenPair

__all__ = [
     "StripeGateway",
     "PaymentIntentResult",
     "SavedCard",
     "IdentityProviderClient",
     "TokenPair",
]
