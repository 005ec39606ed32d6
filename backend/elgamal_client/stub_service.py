"""
Stand-in for the remote encryption service, for local runs and tests.

It encrypts a fresh plaintext for every request and remembers it, so the
client's published results can be checked against what was sent.
"""

import os
import secrets

from fastapi import FastAPI, HTTPException

from elgamal_client.crypto.elgamal import encrypt
from elgamal_client.models import DomainParameters, EncryptRequest, EncryptResponse


class StubEncryptor:
    def __init__(self, p: int, a: int):
        if p < 3:
            raise ValueError("p must be at least 3")
        self.params = DomainParameters(p=p, a=a)
        self.plaintexts: list[int] = []

    def next_plaintext(self) -> int:
        return secrets.randbelow(self.params.p)

    def encrypt(self, public_key: int) -> EncryptResponse:
        p, a = self.params.p, self.params.a
        if not 0 < public_key < p:
            raise ValueError("public key out of range")
        m = self.next_plaintext()
        y1, y2 = encrypt(p, a, public_key, m)
        self.plaintexts.append(m)
        return EncryptResponse(y1=y1, y2=y2)


encryptor = StubEncryptor(
    p=int(os.getenv("ELGAMAL_P", "467")),
    a=int(os.getenv("ELGAMAL_A", "2")),
)

app = FastAPI(title="ElGamal Encryption Stub", version="0.1.0")


@app.get("/health")
async def health() -> dict:
    return {"status": "ok"}


@app.get("/elgamal_params", response_model=DomainParameters)
async def elgamal_params():
    return encryptor.params


@app.post("/encrypt", response_model=EncryptResponse)
async def encrypt_endpoint(payload: EncryptRequest):
    try:
        return encryptor.encrypt(payload.public_key)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.get("/plaintexts")
async def plaintexts() -> dict:
    return {"plaintexts": encryptor.plaintexts}
