"""Authentication and authorization.

Three pieces, from the bottom up:
1. password — bcrypt hashing and verification (credential store)
2. jwt — signed bearer tokens carrying the username (session issuer)
3. access — who may read or mark-read a message (pure decisions)

dependencies wires 2 into FastAPI as the "current identity".
"""
