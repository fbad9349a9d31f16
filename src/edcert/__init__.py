"""edcert: self-signed Ed25519 TLS certificates for one or more domains."""

__version__ = "0.1.0"
