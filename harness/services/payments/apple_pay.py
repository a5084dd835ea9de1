import logging
import ssl
from typing import Any, Dict, Optional, Tuple

import httpx

from harness.core.config import Settings
from harness.core.credentials import CredentialTable
from harness.core.errors import ConfigurationError, UpstreamTransportError
from harness.schemas.payments import ApplePayContact, ApplePayPayment
from .reference import generate_reference

logger = logging.getLogger(__name__)

Relayed = Tuple[int, Dict[str, Any]]


class ApplePayClient:
    """
    Apple Pay merchant validation and the token -> payment flow against the
    provider. Responses are relayed with their upstream status code.
    """

    def __init__(self, settings: Settings, credentials: CredentialTable, transport: Optional[httpx.BaseTransport] = None):
        self.settings = settings
        self.credentials = credentials
        self.transport = transport

    def merchant_id(self) -> str:
        if not self.settings.APPLE_PAY_MERCHANT_ID:
            raise ConfigurationError("APPLE_PAY_MERCHANT_ID is not set")
        return self.settings.APPLE_PAY_MERCHANT_ID

    def validate_session(self, validation_url: str) -> Relayed:
        """request a merchant session from Apple using the merchant identity certificate."""
        payload = {
            "merchantIdentifier": self.merchant_id(),
            "domainName": self.settings.APPLE_PAY_DOMAIN,
            "displayName": self.settings.APPLE_PAY_DISPLAY_NAME,
        }
        with self._client(merchant_identity=True) as client:
            status, body = self._post(client, validation_url, payload, headers={})
        logger.info(f"validate session response: {status}")
        return status, body

    def pay(self, payment: ApplePayPayment) -> Relayed:
        """tokenise the Apple Pay payment data, then pay with the token."""
        pair = self.credentials.get(self.settings.APPLE_PAY_TENANT)
        base = self.settings.PROVIDER_API_URL.rstrip("/")

        token_data = payment.token.paymentData
        with self._client() as client:
            status, token_response = self._post(
                client,
                f"{base}/tokens",
                {"type": "applepay", "token_data": token_data},
                headers={"Authorization": pair.public_key},
            )
            logger.info(f"create token response: {status}")
            if status >= 400 or "token" not in token_response:
                return status, token_response

            source: Dict[str, Any] = {"type": "token", "token": token_response["token"]}
            billing = _billing_address(payment.billingContact)
            if billing:
                source["billing_address"] = billing

            body = {
                "source": source,
                "amount": self.settings.APPLE_PAY_AMOUNT,
                "currency": self.settings.APPLE_PAY_CURRENCY,
                "reference": f"REF-{generate_reference(6)}",
            }
            if self.settings.CKO_NAS_PROCESSING_CHANNEL_ID:
                body["processing_channel_id"] = self.settings.CKO_NAS_PROCESSING_CHANNEL_ID

            status, payment_response = self._post(
                client, f"{base}/payments", body, headers={"Authorization": pair.secret_key}
            )
        logger.info(f"payment response: {status}")
        return status, payment_response

    def _client(self, merchant_identity: bool = False) -> httpx.Client:
        timeout = self.settings.PROVIDER_TIMEOUT_SECONDS
        if self.transport is not None:
            return httpx.Client(timeout=timeout, transport=self.transport)
        if not merchant_identity:
            return httpx.Client(timeout=timeout)

        cert, key = self.settings.APPLE_PAY_CERTIFICATE, self.settings.APPLE_PAY_KEY
        if not cert or not key:
            raise ConfigurationError("APPLE_PAY_CERTIFICATE and APPLE_PAY_KEY must be set")
        context = ssl.create_default_context()
        try:
            context.load_cert_chain(certfile=cert, keyfile=key)
        except OSError as e:
            raise ConfigurationError(f"Cannot load Apple Pay merchant certificate: {e}") from e
        return httpx.Client(timeout=timeout, verify=context)

    @staticmethod
    def _post(client: httpx.Client, url: str, payload: Dict[str, Any], headers: Dict[str, str]) -> Relayed:
        try:
            response = client.post(url, json=payload, headers=headers)
            body = response.json() if response.content else {}
        except (httpx.HTTPError, ValueError) as e:
            raise UpstreamTransportError(url, e) from e
        return response.status_code, body


def _billing_address(contact: Optional[ApplePayContact]) -> Optional[Dict[str, Any]]:
    if contact is None:
        return None
    return {
        "address_line1": contact.addressLines[0] if contact.addressLines else None,
        "city": contact.locality,
        "state": contact.administrativeArea,
        "zip": contact.postalCode,
        "country": contact.countryCode,
    }
