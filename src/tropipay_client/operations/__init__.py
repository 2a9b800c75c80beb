"""Resource operations built on the authenticated request pipeline.

Each module exposes async functions that take a ``TropipayClient`` first:
- ``common``: Shared path and query-string helpers
- ``users``: Profile, security codes, 2FA and password management
- ``movements``: Movement listings and the GraphQL movement search
- ``deposit_accounts``: Beneficiary management
- ``accounts``: Tropicard linking and crypto self-charge addresses
- ``payment_cards``: Payment link management
"""
