"""Contracts that run on the ledger host (see `contracts.stdlib.token`)."""
