"""
Pneuma - On-chain interaction layer for cookiechain.

Provides ABI loading and the two chain backends:
- substrate: ink! contracts over websocket (substrate-interface)
- rpc: EVM contracts over JSON-RPC (httpx + eth-abi)
"""
