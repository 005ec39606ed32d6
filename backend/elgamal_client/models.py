"""Wire messages exchanged with the parameter source, the encryption service and result consumers."""

from pydantic import BaseModel, Field

from elgamal_client.crypto.modular import I64_MAX, I64_MIN, U64_MAX


class DomainParameters(BaseModel):
    """Public parameters broadcast by the parameter source."""
    p: int = Field(ge=0, le=U64_MAX, description="Prime modulus")
    a: int = Field(ge=0, le=U64_MAX, description="Generator")


class EncryptRequest(BaseModel):
    public_key: int = Field(ge=0, le=U64_MAX)


class EncryptResponse(BaseModel):
    y1: int = Field(ge=0, le=U64_MAX)
    y2: int = Field(ge=0, le=U64_MAX)


class DecryptedResult(BaseModel):
    """One decrypted value per completed round, as a signed 64-bit integer."""
    data: int = Field(ge=I64_MIN, le=I64_MAX)


class NodeStatus(BaseModel):
    state: str
    round_index: int
    total_rounds: int
    in_flight: bool
    finished: bool


class ParamsAck(BaseModel):
    outcome: str
    round_index: int
