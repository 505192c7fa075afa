"""Payment method schemas.

Details are a tagged variant keyed on the method type, so a bank method
cannot be saved without bank fields and a wallet without wallet fields.
"""

import uuid
from datetime import datetime
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field


class BankDetails(BaseModel):
    type: Literal["bank"] = "bank"
    bank_name: str = Field(..., min_length=1, max_length=255)
    account_title: str = Field(..., min_length=1, max_length=255)
    account_number: str = Field(..., min_length=1, max_length=64)
    iban: Optional[str] = Field(None, max_length=64)


class MobileWalletDetails(BaseModel):
    type: Literal["easypaisa", "jazzcash"]
    account_title: str = Field(..., min_length=1, max_length=255)
    account_number: str = Field(..., min_length=1, max_length=64)


class CryptoDetails(BaseModel):
    type: Literal["crypto"] = "crypto"
    wallet_address: str = Field(..., min_length=1, max_length=255)
    network: str = Field(..., min_length=1, max_length=64)


PaymentDetails = Annotated[
    Union[BankDetails, MobileWalletDetails, CryptoDetails],
    Field(discriminator="type"),
]


class PaymentMethodCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    enabled: bool = True
    details: PaymentDetails


class PaymentMethodUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    enabled: Optional[bool] = None
    details: Optional[PaymentDetails] = None


class PaymentMethodResponse(BaseModel):
    id: uuid.UUID
    name: str
    type: str
    enabled: bool
    details: PaymentDetails
    created_date: Optional[datetime] = None
    updated_date: Optional[datetime] = None
