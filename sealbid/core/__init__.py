"""
Sealbid core: auction engine, configuration and ledger storage.
"""
