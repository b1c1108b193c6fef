"""
Theurgy - Command implementations for cookiechain.

Each module corresponds to a top-level CLI command:
- load:     Connect, load the account and query the contract
- messages: List the callable messages of an ABI file
- init:     Store the secret phrase in ~/.cookiechain/.env
"""
