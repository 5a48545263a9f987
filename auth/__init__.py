"""
auth: account registration and sign-in.

Provides:
  • JWT issuance & verification carrying ``accountId`` + ``walletAddress``
  • Password hashing (bcrypt)
  • EVM wallet-address validation
  • Signup / signin API routes
  • ``get_current_claims`` FastAPI dependency
"""
