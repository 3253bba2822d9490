"""
Operator tooling: a local keypair signer and the swell-token CLI.

These sit outside the core. The core never loads or sees key material; the CLI
builds a KeypairSigner and hands the core only its signing capability.
"""
