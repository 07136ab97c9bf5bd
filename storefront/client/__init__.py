from storefront.client.api_client import ApiClient, ApiResponse
from storefront.client.app import StorefrontClient, build_client
from storefront.client.cart import CartService
from storefront.client.checkout import CheckoutService, CheckoutStep
from storefront.client.checkout_form import CheckoutForm
from storefront.client.currency import Currency, CurrencyService
from storefront.client.dashboard import BookingHistory
from storefront.client.favorites import FavoritesService
from storefront.client.notifier import Notifier
from storefront.client.session import AuthSession

__all__ = [
    "ApiClient", "ApiResponse", "AuthSession", "Notifier",
    "CartService", "CheckoutService", "CheckoutStep", "CheckoutForm",
    "FavoritesService", "CurrencyService", "Currency", "BookingHistory",
    "StorefrontClient", "build_client",
]
