"""Frame request/response models and payment session payloads."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .state import ButtonAction, ClientProtocol, PaymentSessionState, SettlementStatus


MAX_BUTTONS = 4


class FrameContext(BaseModel):
    """Everything a frame state may read for one request.

    Built fresh from the inbound request; nothing here outlives it.
    """
    route: str = "/"
    button_index: Optional[int] = None
    button_value: Optional[str] = None
    input_text: Optional[str] = None
    transaction_id: Optional[str] = None
    address: Optional[str] = None
    fid: Optional[int] = None
    protocol: ClientProtocol = ClientProtocol.FARCASTER
    verified_address: Optional[str] = None

    @property
    def payer_address(self) -> Optional[str]:
        """Wallet that pays for a transaction; the verified XMTP address wins."""
        return self.verified_address or self.address


class FrameButton(BaseModel):
    """One action offered by a frame."""
    label: str
    action: ButtonAction = ButtonAction.POST
    target: Optional[str] = None
    value: Optional[str] = None
    post_url: Optional[str] = None  # Where the client posts after a tx button completes


class FrameView(BaseModel):
    """Declarative description of what to render."""
    name: str
    params: Dict[str, str] = Field(default_factory=dict)


class FrameResponse(BaseModel):
    """One rendered frame: a view plus its ordered next actions."""
    view: FrameView
    buttons: List[FrameButton] = Field(default_factory=list)
    input_text: Optional[str] = None
    image_path: Optional[str] = None  # Sub-route that renders the image instead of the view route

    @field_validator("buttons")
    @classmethod
    def check_button_count(cls, v):
        if len(v) > MAX_BUTTONS:
            raise ValueError(f"A frame supports at most {MAX_BUTTONS} buttons, got {len(v)}")
        return v


class UserProfile(BaseModel):
    """Farcaster user as returned by the identity service."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    fid: int
    username: str
    display_name: Optional[str] = None
    pfp_url: Optional[str] = None
    follower_count: Optional[int] = None


class TransactionIntent(BaseModel):
    """Priced storage rental, before the provider mints a payable transaction."""
    chain_id: str
    to: str
    data: str
    value: int
    units: int
    unit_price: int
    fid: int

    @property
    def hex_value(self) -> str:
        return hex(self.value)


class UnsignedTransaction(BaseModel):
    """Transaction the payer's wallet is asked to sign."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    chain_id: str = Field(alias="chainId")
    to: str
    data: str = Field(alias="input")
    value: str = "0x0"


class PaymentSession(BaseModel):
    """Session descriptor owned by the payment provider."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    session_id: str = Field(alias="sessionId")
    state: PaymentSessionState = PaymentSessionState.CREATED
    payment_transaction_hash: Optional[str] = Field(default=None, alias="paymentTransactionHash")
    sponsored_transaction_hash: Optional[str] = Field(default=None, alias="sponsoredTransactionHash")
    unsigned_transaction: Optional[UnsignedTransaction] = Field(default=None, alias="unsignedTransaction")

    @property
    def is_settled(self) -> bool:
        return self.state == PaymentSessionState.SETTLED and bool(self.sponsored_transaction_hash)


class SettlementResult(BaseModel):
    """Outcome of reconciling one payment transaction hash."""
    status: SettlementStatus
    tx_hash: str
    settlement_hash: Optional[str] = None
    reason: Optional[str] = None


class TransactionParams(BaseModel):
    abi: List[Dict[str, Any]] = Field(default_factory=list)
    to: str
    data: str
    value: str


class TransactionPayload(BaseModel):
    """JSON body answered by the transaction route."""
    model_config = ConfigDict(populate_by_name=True)

    chain_id: str = Field(alias="chainId")
    method: str = "eth_sendTransaction"
    attribution: Optional[bool] = None
    params: TransactionParams
