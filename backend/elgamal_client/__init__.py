"""ElGamal exchange client: round protocol, modular arithmetic and HTTP adapters."""
