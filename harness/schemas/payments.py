from typing import Any, Dict, List, Optional, Union
from pydantic import BaseModel, ConfigDict


class ProxyRequest(BaseModel):
    domain: str
    path: str
    verb: str = "GET"
    body: Any = None
    tenant: Optional[str] = None  # account structure, defaults to DEFAULT_TENANT


class ProxyResponse(BaseModel):
    # int for a relayed upstream status, "exception" for transport failures
    status: Union[int, str]
    statusText: Optional[str] = None
    body: Any = {}


class KeyOut(BaseModel):
    structure_id: str
    public_key: str


class ApplePayValidateSessionRequest(BaseModel):
    validationURL: str


class ApplePayToken(BaseModel):
    model_config = ConfigDict(extra="allow")

    # encrypted blob handed to the provider untouched
    paymentData: Dict[str, Any]


class ApplePayContact(BaseModel):
    model_config = ConfigDict(extra="allow")

    addressLines: List[str] = []
    locality: Optional[str] = None
    administrativeArea: Optional[str] = None
    postalCode: Optional[str] = None
    countryCode: Optional[str] = None


class ApplePayPayment(BaseModel):
    """the ApplePayPayment object the browser receives from the payment sheet."""
    model_config = ConfigDict(extra="allow")

    token: ApplePayToken
    billingContact: Optional[ApplePayContact] = None


class ApplePayPaymentRequest(BaseModel):
    payment: ApplePayPayment
