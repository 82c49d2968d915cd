"""Authentication and authorization core.

Learn: Every protected request passes through the same four pieces,
in this order:

1. jwt.py          — issue / verify signed, 24h identity tokens
2. dependencies.py — pull the bearer token out of the Authorization
                     header and resolve the user id (fails closed)
3. membership.py   — read-only "is this user in / the owner of org X"
4. policies.py     — per-action rules built on top of 1–3

The result is an explicit CurrentIdentity that routes hand to the
service layer; nothing reads identity from global state.
"""
