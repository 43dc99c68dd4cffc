"""
Persistence adapters.

Two interchangeable stores implement the same `DemoStore` contract: a JSON file
(local) and a SQL database (remote). Routers and services only ever talk to
the contract, never to the file or the session directly.
"""
