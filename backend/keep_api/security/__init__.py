"""
Keep API — Security Layer
===========================

    - passwords.py:  bcrypt hashing and verification
    - tokens.py:     TokenService (issue/verify signed bearer tokens)
    - auth_gate.py:  AuthGate + the `require_admin` FastAPI dependency
"""
